"""Jinja2 syntax support for the filter registry."""

import re
from typing import Dict, Mapping, Optional, Tuple

from jinja2 import nodes
from jinja2.ext import Extension

from .adapters import FilterSyntaxError
from .filters import NEGATED_ALIAS_PREFIX, NEGATION_PREFIX, jinja_filter_name

_STRING_LITERAL = r"'(?:[^'\\]|\\.)*'|\"(?:[^\"\\]|\\.)*\""

_NEGATED_FILTER = re.compile(
    r"(?P<string>" + _STRING_LITERAL + r")"
    r"|\|(?P<space>\s*)" + re.escape(NEGATION_PREFIX) + r"\s*(?=[A-Za-z_])",
    re.DOTALL,
)


def _alias_negation(match: "re.Match[str]") -> str:
    if match.group("string") is not None:
        return match.group("string")
    return "|" + match.group("space") + NEGATED_ALIAS_PREFIX


class NegatedFilterExtension(Extension):
    """Allow ``value|!name`` in templates.

    Jinja2 only accepts identifiers as filter names, so inside expression and
    statement delimiters ``|!name`` is rewritten to the installed alias
    ``|not_name`` before the template is lexed. String literals, comments and
    ``raw`` blocks are left as written.
    """

    def _tag_pattern(self) -> "re.Pattern[str]":
        env = self.environment
        block_start = re.escape(env.block_start_string)
        block_end = re.escape(env.block_end_string)
        return re.compile(
            r"(?P<raw>"
            + block_start
            + r"[-+]?\s*raw\s*[-+]?"
            + block_end
            + r".*?"
            + block_start
            + r"[-+]?\s*endraw\s*[-+]?"
            + block_end
            + r")"
            + r"|(?P<comment>"
            + re.escape(env.comment_start_string)
            + r".*?"
            + re.escape(env.comment_end_string)
            + r")"
            + r"|(?P<open>"
            + re.escape(env.variable_start_string)
            + r"|"
            + block_start
            + r")(?P<body>(?:"
            + _STRING_LITERAL
            + r"|.)*?)(?P<close>"
            + re.escape(env.variable_end_string)
            + r"|"
            + block_end
            + r")",
            re.DOTALL,
        )

    def preprocess(
        self, source: str, name: Optional[str], filename: Optional[str] = None
    ) -> str:
        def rewrite(match: "re.Match[str]") -> str:
            if match.group("body") is None:
                return match.group(0)
            body = _NEGATED_FILTER.sub(_alias_negation, match.group("body"))
            return match.group("open") + body + match.group("close")

        return self._tag_pattern().sub(rewrite, source)


def argument_signatures(
    argument_types: Mapping[str, type]
) -> Dict[str, Tuple[str, type]]:
    """Map installed filter names to (registry name, argument type)."""
    return {
        jinja_filter_name(name): (name, expected)
        for name, expected in argument_types.items()
    }


def check_filter_calls(
    ast: nodes.Template,
    signatures: Mapping[str, Tuple[str, type]],
    name: Optional[str] = None,
    filename: Optional[str] = None,
) -> None:
    """Check the arguments of argument-taking filters in a parsed template.

    Only what is visible in the source is checked: the number of arguments
    and the type of literal arguments. Arguments computed at render time are
    checked when the filter runs.

    Args:
        ast: Parsed template
        signatures: Result of argument_signatures for the installed registry
        name: Template name for error reporting
        filename: Template file name for error reporting

    Raises:
        FilterSyntaxError: If a filter call has the wrong arguments
    """
    for call in ast.find_all(nodes.Filter):
        signature = signatures.get(call.name)
        if signature is None:
            continue

        filter_name, expected = signature
        valid = (
            len(call.args) == 1
            and not call.kwargs
            and call.dyn_args is None
            and call.dyn_kwargs is None
        )
        if valid and isinstance(call.args[0], nodes.Const):
            valid = isinstance(call.args[0].value, expected)

        if not valid:
            raise FilterSyntaxError(
                filter_name,
                expected.__name__,
                lineno=call.lineno,
                name=name,
                filename=filename,
            )
