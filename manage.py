#!/usr/bin/env python3
"""
Mountaintop Pick'em Management CLI

Command-line management for users, leagues, game results and standings.
"""

import logging
import os

import click
from flask import current_app
from flask.cli import with_appcontext
from flask_migrate import downgrade, migrate, upgrade
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from mountaintop import create_app, db
from mountaintop.errors import PickemError
from mountaintop.models import Game, League, Pick, Season, User
from mountaintop.services.leaderboard import get_leaderboard
from mountaintop.services.results import ResultFinalizer
from mountaintop.services.scoring import PickScorer

logger = logging.getLogger(__name__)


@click.group()
def cli():
    """Mountaintop Pick'em Management CLI"""
    pass


# User Management Commands
@cli.group()
def user():
    """User management commands"""
    pass


@user.command()
@click.argument("username")
@click.argument("email")
@click.argument("password")
@click.option("--display-name", help="Display name")
@with_appcontext
def create_admin(username, email, password, display_name):
    """Create an admin user"""
    existing = User.query.filter(
        (User.username == username) | (User.email == email)
    ).first()
    if existing:
        click.echo(
            f"❌ User with username '{username}' or email '{email}' already exists!"
        )
        return

    try:
        admin = User(
            username=username,
            email=email,
            display_name=display_name,
            is_active=True,
            is_admin=True,
        )
        admin.set_password(password)

        db.session.add(admin)
        db.session.commit()
        click.echo(f"✅ Created admin user '{username}' ({email})")
    except SQLAlchemyError as e:
        db.session.rollback()
        click.echo(f"❌ Error creating user: {str(e)}")
        logger.error(f"Admin creation failed - SQL error: {e}")


@user.command()
@with_appcontext
def list_users():
    """List all users"""
    users = User.query.order_by(User.id).all()

    if not users:
        click.echo("No users found.")
        return

    click.echo("Users:")
    for u in users:
        status = "🟢" if u.is_active else "🔴"
        role = " [admin]" if u.is_admin else ""
        click.echo(f"  {status} {u.username} ({u.email}) - {u.full_name}{role}")


# League Commands
@cli.group()
def league():
    """League management commands"""
    pass


@league.command()
@click.argument("name")
@click.argument("owner")
@click.option("--description", help="League description")
@click.option("--public", is_flag=True, help="Make the league public")
@with_appcontext
def create(name, owner, description, public):
    """Create a league owned by OWNER (a username)"""
    owner_user = User.query.filter_by(username=owner).first()
    if not owner_user:
        click.echo(f"❌ User '{owner}' not found!")
        return

    try:
        new_league = League(
            name=name,
            description=description,
            is_public=public,
            owner_id=owner_user.id,
        )
        db.session.add(new_league)
        db.session.flush()
        new_league.add_member(owner_user, role="owner")
        db.session.commit()
        click.echo(f"✅ Created league '{name}' (join code {new_league.code})")
    except IntegrityError as e:
        db.session.rollback()
        click.echo(f"❌ League '{name}' could not be created: {str(e)}")
        logger.error(f"League creation failed - integrity error: {e}")


# Game Result Commands
@cli.group()
def game():
    """Game result and scoring commands"""
    pass


@game.command()
@click.argument("game_id", type=int)
@click.argument("home_score", type=int)
@click.argument("away_score", type=int)
@click.option(
    "--not-final", is_flag=True, help="Record a live score without finalizing"
)
@with_appcontext
def finalize(game_id, home_score, away_score, not_final):
    """Record a game result and score its picks"""
    try:
        finalizer = ResultFinalizer(
            db.session, max_score=current_app.config["MAX_SCORE"]
        )
        updated = finalizer.finalize(
            game_id, home_score, away_score, not not_final
        )
    except PickemError as e:
        click.echo(f"❌ {e.message}")
        for field, message in e.details.items():
            click.echo(f"   {field}: {message}")
        return

    winner = updated.winner_team.abbreviation if updated.winner_team else "tie"
    click.echo(
        f"✅ Game {game_id}: {updated.away_team.abbreviation} {updated.away_score} @ "
        f"{updated.home_team.abbreviation} {updated.home_score} "
        f"(final={updated.is_final}, winner={winner if updated.is_final else 'n/a'})"
    )


@game.command()
@click.argument("game_id", type=int)
@with_appcontext
def rescore(game_id):
    """Re-run scoring for one game"""
    try:
        scored = PickScorer(db.session).score_game(game_id)
        db.session.commit()
    except PickemError as e:
        db.session.rollback()
        click.echo(f"❌ {e.message}")
        return
    except SQLAlchemyError as e:
        db.session.rollback()
        click.echo(f"❌ Database error rescoring game {game_id}: {str(e)}")
        logger.error(f"Rescore failed for game {game_id}: {e}")
        return

    click.echo(f"✅ Scored {scored} picks for game {game_id}")


@game.command()
@with_appcontext
def rescore_all():
    """Score every pick still unscored on a final game"""
    scorer = PickScorer(db.session)
    game_ids = scorer.unscored_game_ids()

    if not game_ids:
        click.echo("✅ No unscored picks found - all picks are already scored!")
        return

    click.echo(f"🔍 Found {len(game_ids)} final games with unscored picks")
    try:
        results = scorer.score_games(game_ids)
        db.session.commit()
    except (PickemError, SQLAlchemyError) as e:
        db.session.rollback()
        click.echo(f"❌ Error scoring picks, nothing was saved: {str(e)}")
        logger.error(f"Rescore-all failed: {e}")
        return

    for game_id, scored in results.items():
        click.echo(f"   Game {game_id}: {scored} picks scored")
    click.echo(f"🎉 Scored {sum(results.values())} picks")


# Leaderboard Commands
@cli.group()
def leaderboard():
    """Standings commands"""
    pass


@leaderboard.command()
@click.option("--season-id", type=int, help="Only count picks from this season")
@click.option("--league-id", type=int, help="Only count picks from this league")
@with_appcontext
def show(season_id, league_id):
    """Print the leaderboard"""
    entries = get_leaderboard(db.session, season_id=season_id, league_id=league_id)

    if not entries:
        click.echo("No leaderboard entries.")
        return

    click.echo(f"{'#':>3}  {'Player':<20} {'Pts':>5} {'Correct':>8} {'Picks':>6} {'Win %':>7}")
    for rank, entry in enumerate(entries, start=1):
        click.echo(
            f"{rank:>3}  {entry.display_name:<20} {entry.total_points:>5} "
            f"{entry.correct_picks:>8} {entry.total_picks:>6} {entry.win_pct:>7.1%}"
        )


# Database Commands
@cli.group()
def db_cmd():
    """Database commands"""
    pass


@db_cmd.command()
@with_appcontext
def init_db():
    """Initialize database tables"""
    db.create_all()
    click.echo("✅ Database tables created successfully!")


@db_cmd.command()
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt")
@with_appcontext
def reset(yes):
    """⚠️  DANGER: Drop and recreate all tables"""
    if not yes and not click.confirm("This will DELETE ALL DATA. Are you sure?"):
        click.echo("Cancelled.")
        return

    db.drop_all()
    db.create_all()
    click.echo("✅ Database reset successfully!")


# Database Migration Commands
@cli.group()
def db_migrate():
    """Database migration commands"""
    pass


@db_migrate.command()
@with_appcontext
def init_migrations():
    """Initialize migrations repository"""
    if os.path.exists("migrations"):
        click.echo("❌ Migrations directory already exists!")
        return

    from flask_migrate import init as flask_migrate_init

    flask_migrate_init()
    click.echo("✅ Migrations repository initialized!")


@db_migrate.command()
@click.option("-m", "--message", required=True, help="Migration message")
@with_appcontext
def create_migration(message):
    """Create a new migration"""
    migrate(message=message)
    click.echo(f"✅ Migration created: {message}")


@db_migrate.command()
@click.option("--revision", default="head", help="Revision to upgrade to")
@with_appcontext
def apply_migrations(revision):
    """Apply migrations to database"""
    upgrade(revision=revision)
    click.echo(f"✅ Migrations applied to {revision}")


@db_migrate.command()
@click.option("--revision", required=True, help="Revision to downgrade to")
@with_appcontext
def rollback_migration(revision):
    """Rollback migrations to specific revision"""
    downgrade(revision=revision)
    click.echo(f"✅ Rolled back to {revision}")


# Info Commands
@cli.command()
@with_appcontext
def status():
    """Show application status"""
    click.echo("🏔️  Mountaintop Pick'em Status")
    click.echo("=" * 40)

    current_season = Season.get_current_season()
    if current_season:
        click.echo(f"✅ Current Season: {current_season.name or current_season.year}")
    else:
        click.echo("⚠️  Current Season: None active")

    user_count = User.query.filter_by(is_active=True).count()
    click.echo(f"👥 Active Users: {user_count}")

    league_count = League.query.filter_by(is_active=True).count()
    click.echo(f"🏆 Active Leagues: {league_count}")

    game_count = Game.query.count()
    final_count = Game.query.filter_by(is_final=True).count()
    click.echo(f"🏈 Games: {final_count}/{game_count} completed")

    unscored = (
        Pick.query.join(Game, Pick.game_id == Game.id)
        .filter(Game.is_final.is_(True), Pick.spread_correct.is_(None))
        .count()
    )
    if unscored:
        click.echo(f"⚠️  Unscored picks on final games: {unscored}")


if __name__ == "__main__":
    app = create_app()
    with app.app_context():
        cli()
