"""Human-readable rendering of run reports (stderr, via rich)."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from lang_lock.core.config_patch import PatchOutcome
from lang_lock.model.report import (
    ExportReport,
    ExportStatus,
    FileStatus,
    GenerateReport,
    PackageStatus,
)


def make_console() -> Console:
    return Console(stderr=True, highlight=False)


def _print_skipped(report: ExportReport, console: Console) -> None:
    for skipped in report.skipped:
        console.print(f"[yellow]Skipped {escape(skipped.path)}: {escape(skipped.reason)}[/yellow]")


def render_export_report(report: ExportReport, console: Console) -> None:
    _print_skipped(report, console)

    if report.status is ExportStatus.NO_DISCOVERIES:
        if report.lock_vendor:
            console.print("[yellow]No vendor translations found to lock.[/yellow]")
        else:
            console.print("[yellow]No @locked markers found in files.[/yellow]")
        if report.existing_count:
            console.print(f"Existing locked keys in config: {report.existing_count}")
        return

    if report.existing_count:
        console.print(f"Existing locked keys in config: {report.existing_count}")
    if report.marker_key_count:
        console.print(f"Found @locked markers in files: {report.marker_key_count}")
    if report.vendor_key_count:
        console.print(f"Found vendor keys to lock: {report.vendor_key_count}")

    if report.status is ExportStatus.UP_TO_DATE:
        console.print()
        console.print("[green]All markers already exist in config. Nothing to add.[/green]")
        return

    if report.merge is None:
        return
    table = Table(title="New keys to add", title_justify="left")
    table.add_column("Key", style="yellow")
    table.add_column("Locales", style="green")
    for key, locales in report.merge.delta_by_key().items():
        table.add_row(escape(key), escape(", ".join(locales)))
    console.print()
    console.print(table)
    console.print(report.merge.summary())

    if report.status is ExportStatus.DRY_RUN:
        console.print()
        console.print("[yellow]Dry run mode - no changes made.[/yellow]")
    elif report.status is ExportStatus.ANCHOR_NOT_FOUND:
        console.print()
        console.print(
            "[red]Could not find where to add 'locked_keys' in the config file "
            "(no \"// 'skip_files' => [],\" or \"// 'skip_locales' => [],\" line). "
            "The file was not changed; add the entry manually.[/red]"
        )
    elif report.output_path is not None:
        console.print()
        if report.patch_outcome is None:
            console.print(f"[green]Exported to: {escape(report.output_path.as_posix())}[/green]")
            console.print("Add this to your ai-translator.php config manually.")
        else:
            verb = "Replaced" if report.patch_outcome is PatchOutcome.REPLACED else "Added"
            console.print(
                f"[green]{verb} locked_keys in config: "
                f"{escape(report.output_path.as_posix())}[/green]"
            )


def render_generate_report(report: GenerateReport, console: Console) -> None:
    locale = report.source_locale
    for pkg in report.packages:
        name = f"[yellow]{escape(pkg.package)}[/yellow]"
        if pkg.status is PackageStatus.SOURCE_EXISTS:
            console.print(
                f"{name}: Source locale '{escape(locale)}' already exists. Use --force to overwrite."
            )
            continue
        if pkg.status is PackageStatus.NO_LOCALES:
            console.print(f"{name}: [yellow]No locale directories found. Skipping.[/yellow]")
            continue

        console.print(
            f"{name}: Generating '{escape(locale)}' from '{escape(pkg.reference_locale)}' keys..."
        )
        if pkg.status is PackageStatus.NO_FILES:
            console.print(
                f"  [yellow]No PHP files found in {escape(pkg.reference_locale)}. Skipping.[/yellow]"
            )
            continue
        for f in pkg.files:
            if f.status is FileStatus.FAILED:
                console.print(f"  [red]✗ {escape(f.name)}: {escape(f.error)}[/red]")
            else:
                console.print(f"  [green]✓[/green] {escape(f.name)}: {f.key_count} keys")

    console.print()
    if report.dry_run:
        console.print("[yellow]Dry run mode - no files were written.[/yellow]")
    else:
        console.print(f"[green]Generated {report.generated_count} source file(s).[/green]")
