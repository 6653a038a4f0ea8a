"""CLI commands for Flask application."""

import click
from flask.cli import with_appcontext

from aurora.services.notification_jobs import NotificationJobs


@click.group()
def notifications():
    """Email notification commands."""
    pass


@notifications.command("run")
@click.argument("job", type=click.Choice(NotificationJobs.JOBS))
@with_appcontext
def run_job(job):
    """Run one notification job now and print its results."""
    results = NotificationJobs().run(job)
    click.echo(
        f"{job}: sent={results['sent']} "
        f"skipped={results['skipped']} failed={results['failed']}"
    )
