"""Rich output for reachability, all-paths and flow results."""

from typing import Any, Optional
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.tree import Tree
import json
import yaml


class ResultRenderer:
    """Renders analyzer results as panels, trees and tables, or as json/yaml."""

    # Color scheme for hop and step actions
    COLORS = {
        "allowed": "green",
        "blocked": "red",
        "routed": "cyan",
        "forwarded": "cyan",
        "resolved": "magenta",
        "terminal": "green",
        "entered": "white",
        "traverse": "white",
        "forward": "cyan",
        "destination_reached": "green",
    }

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def render(self, data: Any, fmt: str = "table") -> bool:
        """Render data in a machine-readable format.

        Args:
            data: Dict or list to render
            fmt: Output format (table, json, yaml)

        Returns:
            True if rendered as json/yaml, False if the caller should draw a table
        """
        if fmt == "json":
            self.console.print_json(json.dumps(data, default=str))
            return True
        if fmt == "yaml":
            self.console.print(yaml.safe_dump(data, sort_keys=False))
            return True
        return False

    def _action(self, action: str) -> str:
        color = self.COLORS.get(action, "white")
        return f"[{color}]{action}[/]"

    def _status(self, ok: bool) -> str:
        return "[green]REACHABLE[/]" if ok else "[red]UNREACHABLE[/]"

    def _trace_tree(self, label: str, trace) -> Tree:
        status = "[green]ok[/]" if trace.success else "[red]blocked[/]"
        tree = Tree(f"[bold]{label}[/] ({status})")
        node = tree
        for hop in trace.hops:
            text = (
                f"[bold]{hop.component_type}[/] {hop.component_id} "
                f"{self._action(hop.action.value)}"
            )
            if hop.relationship:
                text = f"[dim]{hop.relationship}[/] " + text
            if hop.details:
                text += f" [dim]{hop.details}[/]"
            node = node.add(text)
        return tree

    def reachability(self, result, fmt: str = "table") -> None:
        """Render a single-path ReachabilityResult."""
        if self.render(result.to_dict(), fmt):
            return

        lines = [f"[bold]Result:[/] {self._status(result.overall_success)}"]
        for label, leg in (
            ("Forward", result.source_to_destination),
            ("Return", result.destination_to_source),
        ):
            verdict = f"[red]{leg.blocking_reason}[/]" if leg.is_blocked() else "[green]ok[/]"
            lines.append(f"[bold]{label}:[/] {verdict}")
        self.console.print(Panel("\n".join(lines), title="Reachability"))

        for label, trace in (
            ("Forward path", result.forward_path),
            ("Return path", result.return_path),
        ):
            if trace is not None and trace.hops:
                self.console.print(self._trace_tree(label, trace))

    def all_paths(self, result, fmt: str = "table") -> None:
        """Render an AllPathsResult with one tree per discovered path."""
        if self.render(result.to_dict(), fmt):
            return

        lines = [
            f"[bold]Result:[/] {self._status(result.has_reachable_path)}",
            f"[bold]Forward:[/] {result.successful_forward_paths}"
            f"/{len(result.forward_paths)} paths succeed",
            f"[bold]Return:[/] {result.successful_return_paths}"
            f"/{len(result.return_paths)} paths succeed",
        ]
        self.console.print(Panel("\n".join(lines), title="All Paths"))

        for label, traces in (
            ("Forward", result.forward_paths),
            ("Return", result.return_paths),
        ):
            for i, trace in enumerate(traces, 1):
                self.console.print(self._trace_tree(f"{label} #{i}", trace))

    def flow(self, result, fmt: str = "table") -> None:
        """Render a FlowResult as a step table."""
        if self.render(result.to_dict(), fmt):
            return

        t = result.traffic
        title = (
            f"Flow {t.source_ip} -> {t.destination_ip}:{t.port}/{t.protocol}"
        )
        table = Table(title=title, show_header=True, header_style="bold")
        table.add_column("#", style="dim", justify="right", width=4)
        table.add_column("Component", style="cyan")
        table.add_column("Type")
        table.add_column("Action")
        table.add_column("Details")
        table.add_column("Rules", justify="right")
        table.add_column("Latency (ms)", justify="right")

        for step in result.steps:
            table.add_row(
                str(step.step_number),
                step.component_id,
                step.component_type,
                self._action(step.action),
                step.details or "-",
                str(len(step.rule_checks)) if step.rule_checks else "-",
                f"{step.latency * 1000:.3f}",
            )

        self.console.print(table)
        if result.success:
            self.console.print(
                f"[green]Delivered[/] [dim]({result.total_latency * 1000:.3f} ms)[/]"
            )
        else:
            where = result.blocking_component or "-"
            self.console.print(f"[red]Blocked at {where}:[/] {result.failure_reason}")
