"""Jinja2 template engine for typestencil."""

import logging
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Union

from jinja2 import (
    ChainableUndefined,
    Environment,
    StrictUndefined,
    Template,
    TemplateSyntaxError,
    UndefinedError,
    meta,
    sandbox,
    select_autoescape,
)
from jinja2.exceptions import SecurityError

from ..config.settings import EngineSettings
from ..typegraph.collection import TypesCollection
from ..typegraph.models import Type
from .adapters import Filter, FilterSyntaxError
from .filters import argument_types, build_filter_registry, install_filters
from .syntax import NegatedFilterExtension, argument_signatures, check_filter_calls

logger = logging.getLogger(__name__)


class TemplateEngine:
    """Jinja2 template engine with the type graph filters installed."""

    def __init__(
        self,
        filters: Optional[Mapping[str, Filter]] = None,
        enable_sandbox: bool = True,
        strict: bool = True,
        cache_size: int = 128,
        trim_blocks: bool = True,
        lstrip_blocks: bool = True,
        keep_trailing_newline: bool = True,
    ) -> None:
        """Initialize the template engine.

        Args:
            filters: Filter table, built with build_filter_registry if omitted
            enable_sandbox: Enable sandboxed environment for security
            strict: Raise on undefined variables unless a render says otherwise
            cache_size: Size of compiled template cache
            trim_blocks: Remove first newline after block
            lstrip_blocks: Remove leading spaces/tabs from line start
            keep_trailing_newline: Keep trailing newline in templates
        """
        options: Dict[str, Any] = dict(
            trim_blocks=trim_blocks,
            lstrip_blocks=lstrip_blocks,
            keep_trailing_newline=keep_trailing_newline,
            cache_size=cache_size,
            undefined=StrictUndefined,
            autoescape=select_autoescape(
                disabled_extensions=("txt", "yaml", "yml"), default_for_string=False
            ),
            extensions=[NegatedFilterExtension],
        )

        # Use sandboxed environment for security
        if enable_sandbox:
            self.env = sandbox.SandboxedEnvironment(**options)
        else:
            self.env = Environment(**options)

        self.filters = filters if filters is not None else build_filter_registry()
        install_filters(self.env, self.filters)
        self._signatures = argument_signatures(argument_types(self.filters))

        self.strict = strict

        # Cache for compiled templates
        self._template_cache: Dict[str, Template] = {}
        self.cache_size = cache_size

    @classmethod
    def from_settings(
        cls,
        settings: EngineSettings,
        filters: Optional[Mapping[str, Filter]] = None,
    ) -> "TemplateEngine":
        """Create an engine from loaded settings."""
        return cls(
            filters=filters,
            enable_sandbox=settings.sandbox,
            strict=settings.strict,
            cache_size=settings.cache_size,
            trim_blocks=settings.trim_blocks,
            lstrip_blocks=settings.lstrip_blocks,
            keep_trailing_newline=settings.keep_trailing_newline,
        )

    def compile_template(
        self,
        template_string: str,
        name: Optional[str] = None,
        filename: Optional[str] = None,
    ) -> Template:
        """Compile a template string with caching.

        Args:
            template_string: The template string to compile
            name: Template name for error reporting
            filename: Template file name for error reporting

        Returns:
            Compiled Jinja2 template

        Raises:
            FilterSyntaxError: If a filter is called with the wrong arguments
            TemplateSyntaxError: If template syntax is invalid
        """
        # Check cache first
        if template_string in self._template_cache:
            return self._template_cache[template_string]

        try:
            ast = self.env.parse(template_string, name=name, filename=filename)
        except TemplateSyntaxError as e:
            raise TemplateSyntaxError(
                f"Invalid template syntax at line {e.lineno}: {e.message}",
                lineno=e.lineno,
                name=e.name,
                filename=e.filename,
            )

        check_filter_calls(ast, self._signatures, name=name, filename=filename)

        try:
            template = self.env.from_string(ast)
        except TemplateSyntaxError as e:
            raise TemplateSyntaxError(
                f"Invalid template syntax at line {e.lineno}: {e.message}",
                lineno=e.lineno,
                name=e.name,
                filename=e.filename,
            )

        # Cache the compiled template (with size limit)
        if len(self._template_cache) >= self.cache_size:
            # Remove oldest entry (simple FIFO)
            oldest_key = next(iter(self._template_cache))
            del self._template_cache[oldest_key]

        self._template_cache[template_string] = template
        logger.debug(f"Compiled template {name or '<string>'}")
        return template

    def render(
        self,
        template_string: str,
        context: Mapping[str, Any],
        strict: Optional[bool] = None,
        name: Optional[str] = None,
        filename: Optional[str] = None,
    ) -> str:
        """Render a template with the given context.

        Args:
            template_string: The template string
            context: Dictionary of template variables
            strict: Raise error on undefined variables, engine default if None
            name: Template name for error reporting
            filename: Template file name for error reporting

        Returns:
            Rendered template string

        Raises:
            UndefinedError: If strict and variable is undefined
            TemplateSyntaxError: If template syntax is invalid
            FilterSyntaxError: If a filter is called with the wrong arguments
            SecurityError: If template contains unsafe operations
        """
        template = self.compile_template(template_string, name=name, filename=filename)
        if strict is None:
            strict = self.strict

        try:
            if strict:
                # Will raise UndefinedError if variable missing
                return template.render(context)
            else:
                # Silently ignore undefined variables
                old_undefined = self.env.undefined
                self.env.undefined = ChainableUndefined
                try:
                    result = template.render(context)
                finally:
                    self.env.undefined = old_undefined
                return result
        except UndefinedError as e:
            raise UndefinedError(f"Template variable not found in context: {e.message}")
        except SecurityError as e:
            raise SecurityError(f"Template contains unsafe operations: {e.message}")

    def render_types(
        self,
        template_string: str,
        types: Union[TypesCollection, Iterable[Type]],
        arguments: Optional[Mapping[str, Any]] = None,
        name: Optional[str] = None,
        filename: Optional[str] = None,
    ) -> str:
        """Render a template against a type graph.

        The template sees ``types`` (the TypesCollection), ``type`` (types by
        name) and ``argument`` (the user supplied arguments).

        Args:
            template_string: The template string
            types: Types to expose to the template
            arguments: Free-form arguments for the template

        Returns:
            Rendered template string
        """
        if not isinstance(types, TypesCollection):
            types = TypesCollection(types)

        context = {
            "types": types,
            "type": types.by_name(),
            "argument": dict(arguments or {}),
        }
        return self.render(template_string, context, name=name, filename=filename)

    def render_file(
        self,
        template_path: Union[str, Path],
        types: Union[TypesCollection, Iterable[Type]],
        arguments: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """Read a template file and render it against a type graph.

        Raises:
            FileNotFoundError: If the template file doesn't exist
        """
        path = Path(template_path)
        if not path.exists():
            raise FileNotFoundError(f"Template file not found: {path}")

        template_string = path.read_text(encoding="utf-8")
        logger.info(f"Rendering template {path}")
        return self.render_types(
            template_string, types, arguments, name=path.name, filename=str(path)
        )

    def extract_variables(self, template_string: str) -> Set[str]:
        """Extract all variable names from a template.

        Args:
            template_string: The template string to analyze

        Returns:
            Set of variable names used in template
        """
        try:
            ast = self.env.parse(template_string)
            return meta.find_undeclared_variables(ast)
        except TemplateSyntaxError:
            # Fallback to regex if parsing fails
            pattern = r"\{\{[\s]*(\w+)"
            return set(re.findall(pattern, template_string))

    def validate_template(self, template_string: str) -> List[str]:
        """Validate template syntax and filter calls.

        Args:
            template_string: The template to validate

        Returns:
            List of error messages (empty if valid)
        """
        errors = []

        if not template_string or not template_string.strip():
            errors.append("Template cannot be empty")
            return errors

        try:
            self.compile_template(template_string)
        except FilterSyntaxError as e:
            errors.append(f"Filter error at line {e.lineno}: {e.message}")
        except TemplateSyntaxError as e:
            errors.append(f"Syntax error at line {e.lineno}: {e.message}")

        return errors
