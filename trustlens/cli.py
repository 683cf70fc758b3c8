"""
Command-line interface for trustlens.

Provides commands to initialize the database, recompute actor and seller
trust, authenticate reviews, and run diagnostic checks.

Usage:
    trustlens init-db                        # Create tables
    trustlens recalculate-trust user-1       # Recompute one user's trust
    trustlens recalculate-trust --all        # Recompute every user
    trustlens seller-trust vendor v-1        # Seller trust from return rates
    trustlens authenticate r-1 r-2           # Authenticate reviews
    trustlens auth-stats                     # Authentication statistics
    trustlens health                         # Check service health
"""

import asyncio
import sys
from typing import Any

import click

from trustlens.config.settings import get_settings
from trustlens.errors import TrustLensError
from trustlens.observability.logging import setup_logging
from trustlens.observability.metrics import get_metrics


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool) -> None:
    """TrustLens - trust and authenticity scoring for marketplace actors and reviews."""
    setup_logging(level="DEBUG" if debug else None)


def _redis_client() -> Any:
    import redis.asyncio as redis

    return redis.from_url(
        str(get_settings().redis_url), encoding="utf-8", decode_responses=True,
    )


@main.command("init-db")
def init_db() -> None:
    """Initialize the database schema."""
    from trustlens.storage.database import Database
    from trustlens.storage.schema import create_tables

    async def run():
        async with Database() as db:
            await create_tables(db)
        click.echo("Database initialized successfully")

    asyncio.run(run())


@main.command("recalculate-trust")
@click.argument("actor_ids", nargs=-1)
@click.option("--kind", type=click.Choice(["user", "vendor"]), default="user", help="Actor table")
@click.option("--all", "all_actors", is_flag=True, help="Recompute every actor of --kind")
@click.option("--limit", default=1000, help="Maximum actors with --all")
@click.option("--alerts/--no-alerts", default=True, help="Raise alerts for suspicious actors")
def recalculate_trust(
    actor_ids: tuple[str, ...],
    kind: str,
    all_actors: bool,
    limit: int,
    alerts: bool,
) -> None:
    """Recompute and persist actor trust scores."""
    from trustlens.actors.repository import ActorRepository
    from trustlens.actors.schemas import SellerRef
    from trustlens.alerts.config import AlertConfig
    from trustlens.alerts.repository import AlertRepository
    from trustlens.alerts.service import AlertEmitter
    from trustlens.events.publisher import EventPublisher
    from trustlens.storage.database import Database
    from trustlens.trust.calculator import TrustScoreCalculator

    if not actor_ids and not all_actors:
        raise click.UsageError("Pass actor IDs or --all")

    async def run() -> int:
        db = Database()
        await db.connect()
        redis_client = _redis_client() if alerts else None
        failures = 0
        try:
            repo = ActorRepository(db)
            calculator = TrustScoreCalculator(repo)
            emitter = None
            if alerts:
                emitter = AlertEmitter(
                    AlertConfig(),
                    AlertRepository(db),
                    redis_client=redis_client,
                    publisher=EventPublisher(redis_client),
                )

            ids = list(actor_ids) or await repo.list_ids(kind, limit=limit)
            for actor_id in ids:
                try:
                    result = await calculator.recalculate(SellerRef(kind=kind, id=actor_id))
                except TrustLensError as e:
                    failures += 1
                    click.echo(click.style(f"  ✗ {actor_id}: {e}", fg="red"))
                    continue
                click.echo(
                    f"  {actor_id}: trust={result.trust_score} risk={result.risk_level} "
                    f"ip={result.ip_collision.status}"
                )
                if emitter is not None:
                    raised = await emitter.check_actor(result, result.behavior)
                    for alert in raised:
                        click.echo(click.style(f"    ! {alert.severity}: {alert.title}", fg="yellow"))

            click.echo(f"Recomputed {len(ids) - failures} of {len(ids)} actors")
        finally:
            if redis_client is not None:
                await redis_client.aclose()
            await db.close()
        return failures

    if asyncio.run(run()):
        sys.exit(1)


@main.command("seller-trust")
@click.argument("kind", type=click.Choice(["user", "vendor"]))
@click.argument("seller_id")
def seller_trust(kind: str, seller_id: str) -> None:
    """Recompute a seller's trust score from product return rates."""
    from trustlens.actors.repository import ActorRepository
    from trustlens.actors.schemas import SellerRef
    from trustlens.storage.database import Database
    from trustlens.trust.calculator import TrustScoreCalculator

    async def run() -> None:
        async with Database() as db:
            calculator = TrustScoreCalculator(ActorRepository(db))
            result = await calculator.calculate_seller_trust(SellerRef(kind=kind, id=seller_id))

        if result is None:
            click.echo(f"Seller {kind}:{seller_id} has no products")
            return
        click.echo(f"Seller {kind}:{seller_id}")
        click.echo(f"  Trust score:  {result.trust_score}")
        click.echo(f"  Products:     {result.product_count}")
        click.echo(f"  Sold:         {result.total_sales}")
        click.echo(f"  Returned:     {result.total_returns}")
        click.echo(f"  Return rate:  {result.overall_return_rate:.2f}%")

    try:
        asyncio.run(run())
    except TrustLensError as e:
        click.echo(click.style(str(e), fg="red"))
        sys.exit(1)


def _build_workflow(db: Any, redis_client: Any) -> Any:
    from trustlens.actors.repository import ActorRepository
    from trustlens.alerts.config import AlertConfig
    from trustlens.alerts.repository import AlertRepository
    from trustlens.alerts.service import AlertEmitter
    from trustlens.events.publisher import EventPublisher
    from trustlens.linguistic.classifier import TextAuthenticityClassifier
    from trustlens.linguistic.config import TextClassifierConfig
    from trustlens.linguistic.external import TextClassificationClient
    from trustlens.reviews.repository import ReviewRepository
    from trustlens.trust.ip_collision import IPCollisionDetector
    from trustlens.workflow.repository import ReviewAuthRepository
    from trustlens.workflow.service import ReviewAuthenticationWorkflow

    classifier_config = TextClassifierConfig()
    client = TextClassificationClient(classifier_config) if classifier_config.enabled else None
    publisher = EventPublisher(redis_client)
    return ReviewAuthenticationWorkflow(
        auth_repo=ReviewAuthRepository(db),
        review_repo=ReviewRepository(db),
        text_classifier=TextAuthenticityClassifier(
            client=client, classifier_config=classifier_config,
        ),
        ip_detector=IPCollisionDetector(ActorRepository(db)),
        publisher=publisher,
        alert_emitter=AlertEmitter(
            AlertConfig(), AlertRepository(db), redis_client=redis_client, publisher=publisher,
        ),
    )


@main.command()
@click.argument("review_ids", nargs=-1, required=True)
def authenticate(review_ids: tuple[str, ...]) -> None:
    """Authenticate one or more reviews."""
    from trustlens.storage.database import Database

    async def run() -> int:
        db = Database()
        await db.connect()
        redis_client = _redis_client()
        workflow = None
        try:
            workflow = _build_workflow(db, redis_client)
            result = await workflow.bulk_authenticate(list(review_ids))
            for review_id in result.succeeded:
                record = await workflow.get_record(review_id)
                decision = record.final_decision
                click.echo(
                    f"  {review_id}: score={record.overall_authentication_score} "
                    f"decision={decision.status if decision else '-'} "
                    f"stage={record.current_stage}"
                )
            for review_id, error in result.failed.items():
                click.echo(click.style(f"  ✗ {review_id}: {error}", fg="red"))
            click.echo(
                f"Authenticated {result.success_count} reviews, {result.fail_count} failed"
            )
        finally:
            if workflow is not None:
                await workflow.aclose()
            await redis_client.aclose()
            await db.close()
        return result.fail_count

    if asyncio.run(run()):
        sys.exit(1)


@main.command("auth-stats")
def auth_stats() -> None:
    """Show review authentication statistics."""
    from trustlens.storage.database import Database
    from trustlens.workflow.repository import ReviewAuthRepository

    async def run() -> dict[str, Any]:
        async with Database() as db:
            return await ReviewAuthRepository(db).get_stats()

    stats = asyncio.run(run())

    click.echo("\nBy decision:")
    for status, entry in sorted(stats["by_status"].items()):
        click.echo(f"  {status:<24} {entry['count']:>6}  avg score {entry['avg_score']}")
    click.echo("\nBy stage:")
    for stage, count in sorted(stats["by_stage"].items()):
        click.echo(f"  {stage:<24} {count:>6}")
    click.echo("\nFraud indicators:")
    for severity, count in sorted(stats["fraud_indicators_by_severity"].items()):
        click.echo(f"  {severity:<24} {count:>6}")


@main.command()
def health() -> None:
    """Check health of all dependencies."""
    import structlog
    logger = structlog.get_logger()

    async def check():
        results: dict[str, bool] = {}

        # Check Redis
        redis_client = _redis_client()
        try:
            results["redis"] = bool(await redis_client.ping())
        except Exception as e:
            results["redis"] = False
            logger.error("Redis health check failed", error=str(e))
        finally:
            await redis_client.aclose()

        # Check PostgreSQL
        try:
            from trustlens.storage.database import Database
            async with Database() as db:
                results["postgres"] = await db.health_check()
        except Exception as e:
            results["postgres"] = False
            logger.error("Postgres health check failed", error=str(e))

        from trustlens.linguistic.config import TextClassifierConfig
        results["text_classifier_enabled"] = TextClassifierConfig().enabled

        click.echo("\nHealth Check Results:")
        click.echo("-" * 40)

        all_healthy = True
        for name, status in results.items():
            icon = "✓" if status else "✗"
            color = "green" if status else "red"
            click.echo(click.style(f"  {icon} {name}: {status}", fg=color))
            if name in ("redis", "postgres") and not status:
                all_healthy = False

        click.echo("-" * 40)

        if all_healthy:
            click.echo(click.style("All core services healthy!", fg="green"))
            sys.exit(0)
        else:
            click.echo(click.style("Some services unhealthy!", fg="red"))
            sys.exit(1)

    asyncio.run(check())


@main.command("serve-metrics")
@click.option("--port", default=None, type=int, help="Metrics server port")
def serve_metrics(port: int | None) -> None:
    """Expose Prometheus metrics until interrupted."""
    import time

    get_metrics().start_server(port=port or get_settings().metrics_port)
    click.echo("Serving metrics, press Ctrl+C to stop")
    try:
        while True:
            time.sleep(3600)
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
