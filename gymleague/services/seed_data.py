"""
Example records seeded into fallback (demo) storage on first access.

Values are illustrative only. Timestamps are generated at seeding time.
"""

from datetime import timedelta
from typing import Dict, List

from gymleague.utils.datetime_utils import utcnow


def _timestamps(days_ago: int = 0) -> Dict[str, str]:
    stamp = (utcnow() - timedelta(days=days_ago)).isoformat()
    return {"created_at": stamp, "updated_at": stamp}


def seed_gyms() -> List[dict]:
    return [
        {
            "id": "demo-gym-1",
            "name": "Elite Gymnastics Center",
            "address": "123 Main Street",
            "city": "New York",
            "state": "NY",
            "zip_code": "10001",
            "contact_email": "info@elitegymnastics.com",
            "contact_phone": "(555) 123-4567",
            "website": "www.elitegymnastics.com",
            "is_approved": True,
            "admin_id": "demo-admin-id",
            **_timestamps(),
        },
        {
            "id": "demo-gym-2",
            "name": "Metro Sports Complex",
            "address": "456 Oak Avenue",
            "city": "Chicago",
            "state": "IL",
            "zip_code": "60601",
            "contact_email": "contact@metrosports.com",
            "contact_phone": "(555) 987-6543",
            "website": "www.metrosports.com",
            "is_approved": True,
            "admin_id": "demo-admin-id",
            **_timestamps(),
        },
    ]


def seed_events() -> List[dict]:
    creator = {"id": "demo-admin-id", "first_name": "League", "last_name": "Administrator"}
    return [
        {
            "id": "demo-event-1",
            "title": "Spring Championship 2024",
            "description": "Annual spring gymnastics championship featuring all levels",
            "event_date": "2024-04-15",
            "event_time": "10:00",
            "location": "Elite Gymnastics Center",
            "host_gym_id": "demo-gym-1",
            "registration_deadline": "2024-04-01",
            "max_participants": 100,
            "entry_fee": 25,
            "ticket_price": 10,
            "status": "open",
            "levels_allowed": ["Level 4", "Level 5", "Level 6"],
            "age_groups": ["8-10", "11-13", "14+"],
            "created_by": "demo-admin-id",
            **_timestamps(),
            "host_gym": {"id": "demo-gym-1", "name": "Elite Gymnastics Center", "city": "New York"},
            "creator": creator,
        },
        {
            "id": "demo-event-2",
            "title": "Regional Qualifier",
            "description": "Qualifying event for regional championships",
            "event_date": "2024-05-20",
            "event_time": "09:00",
            "location": "Metro Sports Complex",
            "host_gym_id": "demo-gym-2",
            "registration_deadline": "2024-05-05",
            "max_participants": 75,
            "entry_fee": 30,
            "ticket_price": 15,
            "status": "open",
            "levels_allowed": ["Level 6", "Level 7", "Level 8"],
            "age_groups": ["12-14", "15+"],
            "created_by": "demo-admin-id",
            **_timestamps(),
            "host_gym": {"id": "demo-gym-2", "name": "Metro Sports Complex", "city": "Chicago"},
            "creator": creator,
        },
    ]


def seed_members() -> List[dict]:
    return [
        {
            "id": "member-1",
            "first_name": "League",
            "last_name": "Administrator",
            "email": "admin@demo.com",
            "role": "admin",
            "phone": "(555) 123-4567",
            "is_active": True,
            "gym_id": None,
            **_timestamps(),
            "gym": None,
        },
        {
            "id": "member-2",
            "first_name": "Sarah",
            "last_name": "Johnson",
            "email": "coach@demo.com",
            "role": "coach",
            "phone": "(555) 234-5678",
            "is_active": True,
            "gym_id": "demo-gym-id",
            **_timestamps(),
            "gym": {"id": "demo-gym-id", "name": "Elite Gymnastics Center", "city": "New York"},
        },
    ]


def seed_gymnasts() -> List[dict]:
    approved_at = utcnow().isoformat()
    return [
        {
            "id": "demo-gymnast-1",
            "user_id": "demo-gymnast-id",
            "gym_id": "demo-gym-id",
            "level": "Level 5",
            "is_team_member": True,
            "team_name": "Team Elite",
            "approved_by_coach": True,
            "approved_by_coach_at": approved_at,
            "approved_by_coach_id": "demo-coach-id",
            "membership_status": "active",
            "total_points": 450,
            **_timestamps(),
            "user": {"first_name": "Emma", "last_name": "Davis", "email": "gymnast@demo.com"},
        },
        {
            "id": "demo-gymnast-2",
            "user_id": "demo-gymnast-2-id",
            "gym_id": "demo-gym-id",
            "level": "Level 4",
            "is_team_member": False,
            "team_name": "Team Elite",
            "approved_by_coach": False,
            "approved_by_coach_at": None,
            "approved_by_coach_id": None,
            "membership_status": "pending",
            "total_points": 120,
            **_timestamps(),
            "user": {"first_name": "Sarah", "last_name": "Wilson", "email": "sarah.wilson@demo.com"},
        },
    ]


def seed_challenges() -> List[dict]:
    return [
        {
            "id": "demo-challenge-1",
            "title": "Perfect Landing Challenge",
            "description": "Stick 5 consecutive landings on vault without any steps",
            "points": 50,
            "difficulty": "intermediate",
            "category": "Vault",
            "time_limit_days": 30,
            "is_active": True,
            "created_by": "demo-coach-id",
            **_timestamps(),
        },
        {
            "id": "demo-challenge-2",
            "title": "Beam Confidence Builder",
            "description": "Complete full beam routine without falling 3 times in a row",
            "points": 75,
            "difficulty": "advanced",
            "category": "Beam",
            "time_limit_days": 14,
            "is_active": True,
            "created_by": "demo-coach-id",
            **_timestamps(),
        },
        {
            "id": "demo-challenge-3",
            "title": "Floor Expression",
            "description": "Perform floor routine with maximum artistry and expression",
            "points": 40,
            "difficulty": "beginner",
            "category": "Floor",
            "time_limit_days": 21,
            "is_active": True,
            "created_by": "demo-coach-id",
            **_timestamps(),
        },
    ]


def seed_notifications() -> List[dict]:
    return [
        {
            "id": "demo-notif-1",
            "title": "Welcome to the Demo!",
            "message": "This is a sample notification to show how the system works.",
            "type": "info",
            "is_read": False,
            "created_at": _timestamps()["created_at"],
        },
        {
            "id": "demo-notif-2",
            "title": "Event Registration Open",
            "message": "Spring Championship registration is now open!",
            "type": "success",
            "is_read": False,
            "created_at": _timestamps(days_ago=1)["created_at"],
        },
    ]
