"""Management script for database and profile tasks"""

import uuid

import click
from dotenv import load_dotenv
from flask.cli import FlaskGroup

load_dotenv()

from stratguru import create_app  # noqa: E402
from stratguru.billing.plans import Plan  # noqa: E402
from stratguru.extensions import db  # noqa: E402
from stratguru.models.profile import Profile  # noqa: E402


cli = FlaskGroup(create_app=lambda: create_app())


@cli.command("init-db")
def init_db():
    """Initialize the database"""
    db.create_all()
    click.echo("✅ Database initialized successfully!")


@cli.command("drop-db")
@click.confirmation_option(prompt="⚠️  Are you sure you want to drop all tables?")
def drop_db():
    """Drop all database tables"""
    db.drop_all()
    click.echo("✅ Database dropped successfully!")


@cli.command("create-profile")
@click.option("--email", required=True)
@click.option("--plan", type=click.Choice([p.value for p in Plan]), default=Plan.FREE.value)
@click.option("--id", "profile_id", default=None, help="Profile id (defaults to a new UUID)")
def create_profile(email, plan, profile_id):
    """Create a profile row for local webhook testing"""
    profile = Profile(id=profile_id or str(uuid.uuid4()), email=email, plan=plan)
    db.session.add(profile)
    db.session.commit()
    click.echo(f"✅ Created profile {profile.id} ({email}, {plan})")


@cli.command("show-profile")
@click.argument("profile_id")
def show_profile(profile_id):
    """Print a profile as JSON"""
    profile = db.session.get(Profile, profile_id)
    if profile is None:
        raise click.ClickException(f"No profile with id {profile_id}")
    click.echo(profile.to_dict())


if __name__ == "__main__":
    cli()
