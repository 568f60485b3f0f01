import json as _json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from . import config as _cfg
from .device_info import DeviceSnapshot
from .engine import InitFlags
from .mitigation_database import MitigationDatabase
from .mitigation_table import MitigationTableError, configured_rules, dump_table
from .startup import StartupMitigation, mitigated_recommendation
from .utils.logging import set_level

console = Console()


def _rules_or_exit(table_path: str | None):
    try:
        return configured_rules(table_path)
    except MitigationTableError as e:
        console.print(f"[red]Invalid mitigation table:[/red] {e}")
        raise SystemExit(2)


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log verbosity. Equivalent to VKQ_LOG_LEVEL.",
)
def main(log_level: str | None):
    """vkquality: startup mitigation checks for Vulkan/GLES selection."""
    if log_level:
        _cfg.set("VKQ_LOG_LEVEL", log_level.upper())
        set_level(log_level)


@main.command()
@click.option("--brand", default="", help="Build.BRAND of the device.")
@click.option("--device", default="", help="Build.DEVICE codename.")
@click.option("--soc", default="", help="Build.SOC_MODEL (API 31+).")
@click.option("--api-level", type=int, default=None, help="Android API level (required without --getprop).")
@click.option("--security-patch", default="", help="Security patch level, YYYY-MM-DD.")
@click.option(
    "--getprop",
    "getprop_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Read identity from saved `adb shell getprop` output instead of the options above.",
)
@click.option("--skip-mitigation", is_flag=True, help="Bypass the mitigation check (SKIP_STARTUP_MITIGATION).")
@click.option("--gles-only", is_flag=True, help="Force GLES on mitigated devices (GLES_ONLY_ON_MITIGATED_DEVICES).")
@click.option("--table", "table_path", default=None, help="JSON mitigation table. Overrides VKQ_MITIGATION_TABLE.")
@click.option("--json", "as_json", is_flag=True, help="Emit machine-readable JSON.")
def check(
    brand: str,
    device: str,
    soc: str,
    api_level: int | None,
    security_patch: str,
    getprop_file: Path | None,
    skip_mitigation: bool,
    gles_only: bool,
    table_path: str | None,
    as_json: bool,
):
    """Evaluate a device against the startup mitigation table."""
    if getprop_file is not None:
        snapshot = DeviceSnapshot.from_getprop(getprop_file.read_text())
    else:
        if api_level is None:
            raise click.UsageError("--api-level is required unless --getprop is given")
        snapshot = DeviceSnapshot.create(api_level, brand, device, soc, security_patch)

    flags = InitFlags.NONE
    if skip_mitigation or _cfg.get("VKQ_SKIP_STARTUP_MITIGATION"):
        flags |= InitFlags.SKIP_STARTUP_MITIGATION
    if gles_only or _cfg.get("VKQ_GLES_ONLY_ON_MITIGATED_DEVICES"):
        flags |= InitFlags.GLES_ONLY_ON_MITIGATED_DEVICES

    result = {
        "device": snapshot.as_dict(),
        "flags": int(flags),
        "skipped": bool(flags & InitFlags.SKIP_STARTUP_MITIGATION),
        "affected": False,
        "status": None,
        "rule": None,
        "recommend_vulkan": False,
        "recommendation": "engine",
        "message": None,
    }
    if not result["skipped"]:
        mitigation = StartupMitigation(_rules_or_exit(table_path))
        verdict = mitigation.evaluate(snapshot)
        result["affected"] = verdict.affected
        result["status"] = verdict.status.name
        result["rule"] = verdict.rule.record.describe() if verdict.rule else None
        result["recommend_vulkan"] = verdict.recommend_vulkan
        result["message"] = verdict.diagnostic_message
        if verdict.affected:
            result["recommendation"] = mitigated_recommendation(verdict, flags).name

    if as_json:
        click.echo(_json.dumps(result, indent=2))
        return
    console.print("[bold cyan]vkquality startup mitigation[/bold cyan]")
    for k, v in snapshot.as_dict().items():
        console.print(f"{k}: {v}")
    if result["skipped"]:
        console.print("[yellow]Mitigation skipped;[/yellow] the engine would be queried.")
        return
    console.print(result["message"])
    if result["rule"]:
        console.print(f"matched rule: {result['rule']}")
    if result["affected"]:
        console.print(f"[bold red]Affected[/bold red] -> {result['recommendation']}")
    else:
        console.print("[green]Unaffected[/green] -> the engine would be queried.")


@main.command()
@click.option("--table", "table_path", default=None, help="JSON mitigation table. Overrides VKQ_MITIGATION_TABLE.")
@click.option("--json", "as_json", is_flag=True, help="Emit JSON loadable through VKQ_MITIGATION_TABLE.")
def rules(table_path: str | None, as_json: bool):
    """List the effective mitigation rules in match order."""
    db = MitigationDatabase(_rules_or_exit(table_path))
    if as_json:
        click.echo(_json.dumps(dump_table(db.rules), indent=2))
        return
    table = Table(title=f"Mitigation rules ({len(db)})")
    for col in ("#", "brand", "device", "soc", "affected api <=", "fixed api >=", "fixed patch", "vulkan patch"):
        table.add_column(col)
    for i, r in enumerate(db.rules):
        table.add_row(
            str(i),
            r.record.brand or "*",
            r.record.device or "*",
            r.record.soc or "*",
            str(r.affected_api_max),
            str(r.fixed_api_min),
            str(r.fixed_patch_date),
            str(r.vulkan_patch_date),
        )
    console.print(table)


@main.group()
def config():
    """Inspect vkquality configuration."""
    pass


@config.command("list")
@click.option("--json", "as_json", is_flag=True, help="Emit machine-readable JSON.")
def config_list(as_json: bool):
    info = _cfg.describe()
    if as_json:
        click.echo(_json.dumps(info, indent=2, default=str))
        return
    for item in info:
        console.print(f"[bold]{item['name']}[/bold] = {item['current']!r} (default {item['default']!r})")
        console.print(f"    {item['description']}")


if __name__ == "__main__":
    main()
