"""Write the Rollcall OpenAPI schema to disk."""

import typing as t
from pathlib import Path

import orjson
from django.conf import settings
from django.core.management.base import BaseCommand, CommandParser
from ninja.responses import NinjaJSONEncoder

from api.api import api


class Command(BaseCommand):
    help = "Dump the OpenAPI schema of the Rollcall API to a JSON file."

    def add_arguments(self, parser: CommandParser) -> None:
        """Accept an optional output path."""
        parser.add_argument(
            "--output",
            type=Path,
            default=settings.BASE_DIR.parent / ".artifacts" / "openapi.json",
            help="Where to write the schema.",
        )

    def handle(self, *args: t.Any, **options: t.Any) -> None:
        """Dump the OpenAPI schema to a JSON file."""
        output_file: Path = options["output"]
        output_file.parent.mkdir(parents=True, exist_ok=True)
        schema = api.get_openapi_schema()
        output_file.write_bytes(orjson.dumps(schema, default=NinjaJSONEncoder().default, option=orjson.OPT_INDENT_2))
        self.stdout.write(self.style.SUCCESS(f"OpenAPI schema for {len(schema['paths'])} paths dumped to {output_file}"))
