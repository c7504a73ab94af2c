import logging
from typing import Annotated

import typer

from jpa_sculpt.cli.create import create_entity, create_java_file, repository
from jpa_sculpt.cli.fields import basic_field, enum_field, id_field
from jpa_sculpt.cli.inspect import basic_types, entities, entity_info, id_types, java_files, packages
from jpa_sculpt.cli.relationships import many_to_one, one_to_one
from jpa_sculpt.config import log_level_from_env

app = typer.Typer(
    name="jpa-sculpt",
    help="JPA Sculpt CLI: generate and edit JPA entities in Java sources.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def configure(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log debug output to stderr.")] = False,
) -> None:
    """Configure logging for all commands."""
    level = "DEBUG" if verbose else log_level_from_env()
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


app.command("create-java-file")(create_java_file)
app.command("create-entity")(create_entity)
app.command("basic-field")(basic_field)
app.command("id-field")(id_field)
app.command("enum-field")(enum_field)
app.command("one-to-one")(one_to_one)
app.command("many-to-one")(many_to_one)
app.command("repository")(repository)
app.command("entity-info")(entity_info)
app.command("java-files")(java_files)
app.command("packages")(packages)
app.command("entities")(entities)
app.command("basic-types")(basic_types)
app.command("id-types")(id_types)


def main() -> None:
    app()
