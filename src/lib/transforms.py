"""
Transform registry

Named text -> text functions applied to an injected file's text before it
is scanned for directives:

    $file(banner.txt, transform=figlet-slant)

The registry is handed to the injector at construction time; nothing is
registered globally. Unknown names pass the text through unchanged, while
a transform that raises aborts the whole process() call with a
TransformError.
"""

import html
import json
from typing import Callable, Dict, List, Mapping, Optional

import cowsay as cowsay_module
from pyfiglet import Figlet
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name, TextLexer
from pygments.util import ClassNotFound

from ..models.transforms import TransformSpec, TransformCategory
from .errors import TransformError
from .log import LOG


class TransformRegistry:
    """
    Registry of transform specifications and handlers

    Maps transform names to TransformSpec objects. Caller-supplied transforms
    override built-ins of the same name.
    """

    def __init__(
        self,
        transforms: Optional[Mapping[str, Callable[[str], str]]] = None,
        builtins: bool = True,
    ) -> None:
        """
        Args:
            transforms: Extra transforms, name -> function(text) -> text
            builtins: Register the built-in transforms first
        """
        self.specs: Dict[str, TransformSpec] = {}
        if builtins:
            self.textTransforms_register()
            self.escapeTransforms_register()
            self.asciiArtTransforms_register()
            self.highlightTransforms_register()
        for name, function in (transforms or {}).items():
            self.function_register(name, function)

    def register(self, spec: TransformSpec) -> None:
        """Register a transform specification"""
        self.specs[spec.name] = spec

    def function_register(self, name: str, function: Callable[[str], str]) -> None:
        """Register a plain text -> text function under name"""
        self.register(TransformSpec(
            name=name,
            category=TransformCategory.USER,
            description=getattr(function, '__doc__', None) or f'User transform {name}',
            handler=lambda text, variant: function(text),
        ))

    def spec_get(self, name: str) -> Optional[TransformSpec]:
        """
        Get transform specification by name

        Exact names win over wildcard patterns.
        """
        if name in self.specs:
            return self.specs[name]

        for spec in self.specs.values():
            if spec.is_wildcard and spec.matches(name):
                return spec

        return None

    def transforms_listByCategory(self, category: TransformCategory) -> List[TransformSpec]:
        """Get all transforms in a category"""
        return [spec for spec in self.specs.values() if spec.category == category]

    def apply(self, name: str, text: str, path: str = "<unknown>") -> str:
        """
        Run a named transform over text

        Args:
            name: Transform name from the directive
            text: Decoded document text
            path: Document path, for error reporting

        Returns:
            Transformed text; the input text if name is unknown or the
            transform returned nothing (None or an empty string)

        Raises:
            TransformError: The transform raised; the original exception is
                            chained as __cause__
        """
        spec = self.spec_get(name)
        if spec is None:
            LOG(f"Unknown transform '{name}' on {path}, text left unchanged", level=2)
            return text

        try:
            result = spec.handler(text, spec.variant_get(name))
        except Exception as e:
            raise TransformError(name, path, e) from e

        if not result:
            return text
        return result

    def textTransforms_register(self) -> None:
        """Register plain text transforms"""
        self.register(TransformSpec(
            name='trim',
            category=TransformCategory.TEXT,
            description='Strip leading and trailing whitespace',
            handler=lambda text, variant: text.strip(),
            examples=['$file(snippet.txt, transform=trim)'],
        ))

    def escapeTransforms_register(self) -> None:
        """Register escaping transforms"""
        self.register(TransformSpec(
            name='html-escape',
            category=TransformCategory.ESCAPE,
            description='Escape &, <, > and quotes as HTML entities',
            handler=lambda text, variant: html.escape(text),
            examples=['<!-- $file(example.html, transform=html-escape) -->'],
        ))

        self.register(TransformSpec(
            name='json-string',
            category=TransformCategory.ESCAPE,
            description='Encode the text as a JSON string literal',
            handler=lambda text, variant: json.dumps(text, ensure_ascii=False),
            examples=['const template = /*! $file(template.html, transform=json-string) */;'],
        ))

    def asciiArtTransforms_register(self) -> None:
        """Register ASCII art transforms"""

        def figlet_handler(text: str, font_name: str) -> str:
            """Render text with a Figlet font"""
            return Figlet(font=font_name).renderText(text)

        def cowsay_handler(text: str, char_name: str) -> str:
            """Wrap text in a cowsay speech bubble"""
            return cowsay_module.get_output_string(char_name, text)

        self.register(TransformSpec(
            name='figlet-*',
            category=TransformCategory.ASCII_ART,
            description='ASCII art using Figlet fonts',
            handler=figlet_handler,
            is_wildcard=True,
            examples=['$file(title.txt, transform=figlet-doom)'],
        ))

        self.register(TransformSpec(
            name='cowsay-*',
            category=TransformCategory.ASCII_ART,
            description='Cowsay speech bubbles',
            handler=cowsay_handler,
            is_wildcard=True,
            examples=['$file(motd.txt, transform=cowsay-tux)'],
        ))

    def highlightTransforms_register(self) -> None:
        """Register syntax highlighting transforms"""

        def highlight_handler(text: str, language: str) -> str:
            """Highlight text as HTML with inline styles"""
            lexer: Lexer
            try:
                lexer = get_lexer_by_name(language)
            except ClassNotFound:
                lexer = TextLexer()
            return highlight(text, lexer, HtmlFormatter(noclasses=True))

        self.register(TransformSpec(
            name='highlight-*',
            category=TransformCategory.HIGHLIGHT,
            description='Pygments syntax highlighting to HTML',
            handler=highlight_handler,
            is_wildcard=True,
            examples=['<!-- $file(example.py, transform=highlight-python) -->'],
        ))
