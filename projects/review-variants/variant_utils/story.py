"""
Render a Frontastic component schema into a Storybook story stub.
"""
import json
import logging
import re
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from connections.errors import FormatError

from .config import TEMPLATE_DIR

logger = logging.getLogger(__name__)

CONTROLS = {
    "string": "text",
    "markdown": "text",
    "boolean": "boolean",
    "number": "number",
    "enum": "radio",
}

WORD_PATTERN = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z]+|\d+")


def pascal_case(name: str) -> str:
    """'product reviews/list' -> 'ProductReviewsList'."""
    words = WORD_PATTERN.findall(name.replace("/", " "))
    return "".join(word[0].upper() + word[1:].lower() for word in words)


def load_schema(path: Path) -> dict:
    try:
        with open(path, encoding="utf-8") as f:
            schema = json.load(f)
    except OSError as e:
        raise FormatError(path, f"could not read file: {e}") from e
    except json.JSONDecodeError as e:
        raise FormatError(path, f"could not deserialize json: {e}") from e

    if not isinstance(schema, dict) or "name" not in schema or "schema" not in schema:
        raise FormatError(path, "component schema needs `name` and `schema` keys")
    return schema


def _default_value(default) -> str:
    # bool before number: bool is an int subclass
    if isinstance(default, bool):
        return f"defaultValue: {'true' if default else 'false'}, "
    if isinstance(default, str):
        return f'defaultValue: "{default}", '
    if isinstance(default, (int, float)):
        return f"defaultValue: {default}, "
    return ""


def build_arg_types(schema: dict) -> list:
    """
    One argType per schema field. A `description` item documents the field
    that follows it and produces no argType of its own.
    """
    arg_types = []
    description = None

    for group in schema["schema"]:
        category = group.get("name", "")
        for item in group.get("fields", []):
            if item.get("text") is not None:
                description = item["text"]
                continue
            if not item.get("field"):
                logger.warning(f"Skipping schema item without a field name: {item}")
                continue

            control = CONTROLS.get(item.get("type"))
            if control:
                body = f'control: "{control}", table: {{ category: "{category}" }}, '
            else:
                body = "table: { disable: true }, "

            if item.get("values"):
                options = "".join(f'{v["name"]}: "{v["value"]}", ' for v in item["values"])
                body += f"options: {{{options}}}, "

            if "default" in item:
                body += _default_value(item["default"])

            if description is not None:
                body += f'description: "{description}", '
                description = None

            arg_types.append({"field": item["field"], "body": body})

    return arg_types


def create_story(file_path, output_dir=".") -> Path:
    """Write <Name>.stories.tsx for the component schema at file_path."""
    file_path = Path(file_path)
    schema = load_schema(file_path)
    name = pascal_case(str(schema["name"]))

    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        trim_blocks=True,
        keep_trailing_newline=True,
    )
    template = env.get_template("story.tsx.j2")
    content = template.render(name=name, arg_types=build_arg_types(schema))

    output_path = Path(output_dir) / f"{name}.stories.tsx"
    try:
        output_path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise FormatError(output_path, f"could not create story file: {e}") from e
    logger.info(f"Wrote {output_path}")
    return output_path
