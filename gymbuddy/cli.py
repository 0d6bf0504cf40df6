import click
from flask_jwt_extended import create_access_token

from gymbuddy.extensions import db
from gymbuddy.models import AvailabilitySlot, User

# Demo profiles, offsets in degrees from the seed origin
DEMO_PROFILES = [
    {
        "email": "alex@example.com", "name": "Alex Runner", "age": 29, "gender": "male",
        "fitness_level": "intermediate", "fitness_goals": ["weight_loss", "endurance"],
        "preferred_workouts": ["running", "cycling"], "offset": (0.0, 0.0),
        "availability": [("monday", "07:00", "08:30"), ("thursday", "18:00", "19:30")],
    },
    {
        "email": "sam@example.com", "name": "Sam Cyclist", "age": 34, "gender": "female",
        "fitness_level": "intermediate", "fitness_goals": ["weight_loss"],
        "preferred_workouts": ["cycling", "yoga"], "offset": (0.02, 0.015),
        "availability": [("monday", "07:30", "09:00")],
    },
    {
        "email": "jordan@example.com", "name": "Jordan Lifter", "age": 41, "gender": "male",
        "fitness_level": "advanced", "fitness_goals": ["muscle_gain", "strength"],
        "preferred_workouts": ["weight_lifting", "crossfit"], "offset": (0.05, -0.03),
        "availability": [("saturday", "10:00", "12:00")],
    },
    {
        "email": "riley@example.com", "name": "Riley Yogi", "age": 25, "gender": "female",
        "fitness_level": "beginner", "fitness_goals": ["flexibility", "general_fitness"],
        "preferred_workouts": ["yoga", "pilates"], "offset": (-0.01, 0.04),
        "availability": [("thursday", "18:30", "20:00"), ("sunday", "09:00", "10:00")],
    },
]


def seed_profiles(longitude, latitude):
    """Create the demo profiles that don't exist yet. Returns the created users."""
    created = []
    for data in DEMO_PROFILES:
        if User.query.filter_by(email=data["email"]).first():
            continue

        d_lon, d_lat = data["offset"]
        user = User(
            email=data["email"],
            name=data["name"],
            age=data["age"],
            gender=data["gender"],
            fitness_level=data["fitness_level"],
            fitness_goals=list(data["fitness_goals"]),
            preferred_workouts=list(data["preferred_workouts"]),
            is_active=True,
            account_status="active",
            availability=[
                AvailabilitySlot(day=day, start_time=start, end_time=end)
                for day, start, end in data["availability"]
            ],
        )
        user.location = (longitude + d_lon, latitude + d_lat)
        user.refresh_profile_completeness()
        db.session.add(user)
        created.append(user)

    db.session.commit()
    return created


def register_commands(app):
    @app.cli.command("seed-profiles")
    @click.option("--lon", default=31.2357, show_default=True, help="Origin longitude")
    @click.option("--lat", default=30.0444, show_default=True, help="Origin latitude")
    @click.option("--token/--no-token", default=False, help="Print an access token per profile")
    def seed_profiles_command(lon, lat, token):
        """Create demo profiles around a point."""
        created = seed_profiles(lon, lat)
        if not created:
            click.echo("Demo profiles already exist.")
            return
        for user in created:
            click.echo(f"Created {user.name} <{user.email}> (id={user.id})")
            if token:
                click.echo(f"  token: {create_access_token(identity=str(user.id))}")
