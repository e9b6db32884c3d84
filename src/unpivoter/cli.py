"""CLI interface for unpivoter using Click."""

from pathlib import Path

import click
import yaml
from click.core import ParameterSource
from rich.console import Console
from rich.markup import escape

from unpivoter import __version__
from unpivoter.config import apply_config, get_config_params, load_config, save_config
from unpivoter.core import DEFAULT_VALUE_NAME, DEFAULT_VAR_NAME, unpivot_file
from unpivoter.exceptions import EX_USAGE, ArgumentError, FormatError, UnpivotError
from unpivoter.formats import resolve_format
from unpivoter.utils import parse_key_options
from unpivoter.validators import validate_keys

console = Console(stderr=True)

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}

# Options that can come from a config file
CONFIGURABLE_OPTIONS = [
    "keys",
    "file",
    "mode",
    "has_headers",
    "inline",
    "var_name",
    "value_name",
    "strict",
]


class UnpivotCommand(click.Command):
    """Command that prints the full help text when arguments can't be parsed."""

    def parse_args(self, ctx, args):
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            console.print(f"[red]Error:[/red] {escape(e.format_message())}")
            click.echo(ctx.get_help())
            ctx.exit(EX_USAGE)


def _explicit_options(ctx: click.Context, values: dict) -> dict:
    """Keep only the options that were given on the command line."""
    explicit = {}
    for name, value in values.items():
        source = ctx.get_parameter_source(name)
        if source == ParameterSource.COMMANDLINE:
            explicit[name] = value
    return explicit


@click.command(cls=UnpivotCommand, context_settings=CONTEXT_SETTINGS)
@click.option(
    "--keys",
    "-k",
    multiple=True,
    help="Key columns (comma-separated, repeatable). Header names for files with a "
    "header row, zero-based column indices otherwise. Their values are kept on "
    "every output row.",
)
@click.option(
    "--file",
    "-f",
    type=click.Path(path_type=Path),
    help="The path of the file to be processed.",
)
@click.option(
    "--mode",
    "-m",
    help="File format: 'csv' (RFC 4180) or 'tsv' (tabs inside values escaped with "
    "a backslash). Defaults to the file extension.",
)
@click.option(
    "--headers",
    "-H",
    "has_headers",
    is_flag=True,
    help="The first row of the file is a header row.",
)
@click.option(
    "--inline",
    "-i",
    is_flag=True,
    help="Overwrite the input file instead of writing to stdout.",
)
@click.option(
    "--var-name",
    default=DEFAULT_VAR_NAME,
    help=f"Header label for the column name column (default: '{DEFAULT_VAR_NAME}')",
)
@click.option(
    "--value-name",
    default=DEFAULT_VALUE_NAME,
    help=f"Header label for the value column (default: '{DEFAULT_VALUE_NAME}')",
)
@click.option(
    "--strict",
    is_flag=True,
    help="Fail if a key is not a column of the file (unknown keys are ignored by default).",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(path_type=Path),
    help="Load options from a YAML configuration file.",
)
@click.option(
    "--save-config",
    "save_config_path",
    type=click.Path(path_type=Path),
    help="Save the current options to a YAML configuration file and exit.",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Verbose output (written to stderr)",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Preview what would be done without reading or writing files",
)
@click.version_option(version=__version__, prog_name="unpivoter")
@click.pass_context
def main(
    ctx,
    keys,
    file,
    mode,
    has_headers,
    inline,
    var_name,
    value_name,
    strict,
    config_file,
    save_config_path,
    verbose,
    dry_run,
):
    """Unpivot a CSV or TSV file from wide to long format.

    Every row of the input is expanded into one row per non-key column. Each
    new row holds the values of the key columns, followed by the name of one
    non-key column and that column's value. A file with n columns and m key
    columns therefore turns each line into n - m lines of m + 2 fields.

    With --headers the first row names the columns, and the output gets a
    header row of its own. Without it, columns are named by their zero-based
    index and no header row is written.

    Output goes to stdout in the input's format, or back into the input file
    with --inline.

    Examples:

        \b
        # Keep the id column, one row per remaining column
        unpivoter -f sales.csv -H -k id

        \b
        # Headerless TSV, keep the first two columns, rewrite in place
        unpivoter -f data.tsv -k 0,1 --inline
    """
    values = {
        "keys": parse_key_options(keys),
        "file": file,
        "mode": mode,
        "has_headers": has_headers,
        "inline": inline,
        "var_name": var_name,
        "value_name": value_name,
        "strict": strict,
    }
    options = _explicit_options(ctx, values)

    if config_file:
        try:
            config = load_config(config_file)
        except (FileNotFoundError, yaml.YAMLError) as e:
            console.print(f"[red]Error loading config file:[/red] {escape(str(e))}")
            raise click.Abort()
        options = apply_config(
            {name: config[name] for name in CONFIGURABLE_OPTIONS if name in config},
            options,
        )
        if verbose:
            console.print(f"[cyan]Loaded configuration from {config_file}[/cyan]")

    for name, value in values.items():
        options.setdefault(name, value)

    if save_config_path:
        save_config(save_config_path, get_config_params(options))
        console.print(f"[green]Configuration saved to {save_config_path}[/green]")
        return

    try:
        if options["file"] is None:
            raise ArgumentError(
                "You must specify a file to process using the --file or -f argument."
            )
        input_file = Path(options["file"])
        key_list = validate_keys(options["keys"])
        fmt = resolve_format(options["mode"], input_file)

        if dry_run:
            console.print("[yellow]DRY RUN - No files will be read or modified[/yellow]")
            console.print(f"Would process file: {input_file}")
            console.print(f"Format: {fmt.value}")
            console.print(f"Keys: {', '.join(key_list)}")
            console.print(f"Header row: {'yes' if options['has_headers'] else 'no'}")
            if options["inline"]:
                console.print(f"Output: {input_file} (in place)")
            else:
                console.print("Output: stdout")
            return

        result = unpivot_file(
            input_file=input_file,
            keys=key_list,
            mode=fmt.value,
            has_headers=options["has_headers"],
            inline=options["inline"],
            var_name=options["var_name"],
            value_name=options["value_name"],
            strict=options["strict"],
            verbose=verbose,
        )

        if not options["inline"]:
            click.echo(result["output_text"], nl=False)

    except FormatError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        click.echo(ctx.get_help())
        ctx.exit(e.exit_code)
    except UnpivotError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        ctx.exit(e.exit_code)


if __name__ == "__main__":
    main()
