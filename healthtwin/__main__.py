"""
Demo run of the health twin.

Seeds a week of history, recomputes the twin and prints what a dashboard
would show.

Run with: uv run python -m healthtwin
"""

import asyncio

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from healthtwin.config import get_config
from healthtwin.domain.models import RiskLevel
from healthtwin.log import configure_logging
from healthtwin.services.health_twin import HealthTwinService

console = Console()

_LEVEL_STYLE = {RiskLevel.LOW: "green", RiskLevel.MODERATE: "yellow", RiskLevel.HIGH: "red"}


async def main() -> None:
    config = get_config()
    configure_logging(config.logging.level, config.logging.format)

    service = HealthTwinService(config=config)
    await service.startup()

    if not len(service.timeline):
        console.print("[dim]No history found, seeding demo data...[/dim]")
        await service.seed_demo_data()

    twin = await service.refresh_twin()

    timeline_table = Table(title="Recent Timeline")
    timeline_table.add_column("When", style="cyan")
    timeline_table.add_column("Type")
    timeline_table.add_column("Title")
    timeline_table.add_column("Source", style="dim")
    for event in service.timeline.get_recent_events():
        timeline_table.add_row(
            event.timestamp.strftime("%b %d, %Y %H:%M"),
            event.type.value,
            event.title,
            event.source.value,
        )
    console.print(timeline_table)

    meds_table = Table(title="Medications")
    meds_table.add_column("Name")
    meds_table.add_column("Dosage")
    meds_table.add_column("Times")
    meds_table.add_column("Active")
    meds_table.add_column("Taken today")
    for med in service.medications.medications:
        meds_table.add_row(
            med.name,
            med.dosage,
            ", ".join(med.times),
            "yes" if med.active else "no",
            "yes" if med.taken_today else "no",
        )
    console.print(meds_table)

    style = _LEVEL_STYLE[twin.risk_level]
    signals = "\n".join(f"  - {s}" for s in twin.key_signals) or "  (none)"
    nudges = "\n".join(f"  - {n}" for n in twin.nudges)
    console.print(
        Panel(
            f"Risk score: [bold]{twin.risk_score}[/bold]\n"
            f"Risk level: [{style}]{twin.risk_level.value}[/{style}]\n\n"
            f"Key signals:\n{signals}\n\nNudges:\n{nudges}",
            title="Digital Twin",
            border_style=style,
        )
    )


if __name__ == "__main__":
    asyncio.run(main())
