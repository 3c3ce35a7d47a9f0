import logging
from pathlib import Path
from typing import Dict, Optional, Tuple

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from ..config import EngineSettings, load_engine_settings
from ..templates import FILTER_CATALOG, BoolFilter, TemplateEngine
from ..typegraph import TypesCollection, load_type_graph

console = Console()


def parse_arguments(values: Tuple[str, ...]) -> Dict[str, str]:
    """Parse ``key=value`` template arguments.

    Raises:
        click.BadParameter: If a value has no ``=``
    """
    arguments = {}
    for value in values:
        key, sep, argument = value.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(
                f"Expected key=value, got '{value}'", param_hint="--arg"
            )
        arguments[key.strip()] = argument.strip()
    return arguments


def create_engine(settings_path: Optional[Path]) -> TemplateEngine:
    if settings_path:
        settings = load_engine_settings(settings_path)
    else:
        settings = EngineSettings()
    return TemplateEngine.from_settings(settings)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def typestencil(verbose: bool) -> None:
    """typestencil - Render code generation templates against type graphs."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


@typestencil.command("render")
@click.argument("template_path", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--types",
    "types_path",
    type=click.Path(exists=True, path_type=Path),
    help="YAML type graph to render against",
)
@click.option("--arg", "args", multiple=True, help="Template argument as key=value")
@click.option(
    "--settings",
    "settings_path",
    type=click.Path(exists=True, path_type=Path),
    help="YAML engine settings",
)
@click.option(
    "--output", "-o", type=click.Path(path_type=Path), help="Output file for the result"
)
def render(
    template_path: Path,
    types_path: Optional[Path],
    args: Tuple[str, ...],
    settings_path: Optional[Path],
    output: Optional[Path],
) -> None:
    """Render a template file against a type graph."""
    arguments = parse_arguments(args)

    try:
        engine = create_engine(settings_path)
        types = load_type_graph(types_path) if types_path else TypesCollection([])
        rendered = engine.render_file(template_path, types, arguments)
    except Exception as e:
        console.print(f"❌ [red]Error:[/red] {e}")
        raise click.Abort()

    if output:
        output.write_text(rendered, encoding="utf-8")
        console.print(f"📄 Output saved to {output}")
    else:
        click.echo(rendered, nl=False)


@typestencil.command("check")
@click.argument("template_path", type=click.Path(exists=True, path_type=Path))
def check(template_path: Path) -> None:
    """Check template syntax and filter arguments."""
    template_string = template_path.read_text(encoding="utf-8")
    errors = TemplateEngine().validate_template(template_string)

    if errors:
        console.print(f"❌ [red]Template {template_path} is invalid[/red]")
        for error in errors:
            console.print(f"  • {error}")
        raise click.Abort()

    console.print(f"✅ [green]Template {template_path} is valid[/green]")


@typestencil.command("filters")
def list_filters() -> None:
    """List available template filters."""
    filters_table = Table(title="Template Filters")
    filters_table.add_column("Filter", style="cyan")
    filters_table.add_column("Argument", style="yellow")
    filters_table.add_column("Description", style="white")
    filters_table.add_column("Example", style="green")

    for record in FILTER_CATALOG:
        name = record.name
        argument = ""
        if isinstance(record, BoolFilter):
            name = f"{record.name}, {record.negated_name}"
            if record.argument is not None:
                argument = record.argument.__name__
        filters_table.add_row(name, argument, record.description, record.example)

    console.print(filters_table)

    example_template = """
{% for type in types.classes|implements("AutoEquatable") %}
extension {{ type.name }}: Equatable {
{% for variable in type.variables|stored|!annotated("skipEquality") %}
    // compares {{ variable.name|snake_cased }}
{% endfor %}
}
{% endfor %}
""".strip()

    console.print(
        Panel(
            Syntax(example_template, "jinja2", theme="monokai"),
            title="Example Template",
            expand=False,
        )
    )


if __name__ == "__main__":
    typestencil()
