import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, List

from . import script
from .boilerplate import DEFAULT_DIR, DEFAULT_LANG, wrap_in_boilerplate
from .session import BLOCK_MARKER, CompileSession
from .tokenizer import Arguments, parse_args, strip_quotes, tokenize

logger = logging.getLogger(__name__)

# DSL command name -> HTML tag
HTML_TAGS: Dict[str, str] = {
    'Section': 'section', 'Container': 'div', 'Header': 'header', 'Footer': 'footer',
    'Nav': 'nav', 'Main': 'main', 'Aside': 'aside', 'Article': 'article', 'Div': 'div',
    'Title': 'h1', 'Text': 'p', 'Paragraph': 'p', 'Span': 'span', 'Link': 'a',
    'Button': 'button',
    'Input': 'input', 'Textarea': 'textarea', 'Select': 'select',
    'Option': 'option', 'Checkbox': 'input', 'Radio': 'input',
    'Image': 'img', 'Video': 'video', 'Audio': 'audio', 'Canvas': 'canvas',
    'Ul': 'ul', 'Ol': 'ol', 'Li': 'li', 'Menu': 'menu',
    'Table': 'table', 'Tr': 'tr', 'Td': 'td', 'Th': 'th',
}

VOID_TAGS = frozenset({'img', 'input', 'br', 'hr'})

# Attributes consumed while resolving an element, never copied through
RESERVED_ATTRS = frozenset({'size', 'src', 'type', 'id'})

# Div.color = red
PROPERTY_LINE = re.compile(r"^(\w+)\.([\w-]+)\s*=\s*(.*)$")

BLOCK_OPEN = '{'
BLOCK_CLOSE = '}'
COMMENT_PREFIX = '#'


@dataclass
class CommandResult:
    """Output of one command: body markup, a script statement, and the tag a block would close."""
    html: str = ''
    js: str = ''
    tag: str = ''


class MoeCompiler:
    """
    Moe Compiler
    Compiles Moe markup to a standalone HTML page with embedded CSS and JavaScript.

    Features:
    - One command per line, `Command "param" key=value`
    - Blocks opened by a trailing `{` and closed by a lone `}`; open blocks are closed at end of input
    - Style lines (`Name.prop = value`) that apply to the next emitted element
    - Variables (Var), DOM text updates (Set), alerts (Alert)
    - OnClick blocks that attach the statements inside to the previous element
    - Unknown commands become HTML comments, nothing raises
    """

    def __init__(self, lang: str = DEFAULT_LANG, direction: str = DEFAULT_DIR):
        self.lang = lang
        self.direction = direction
        # Logic commands, resolved after the element table
        self.logic_commands: Dict[str, Callable[[Arguments, bool, CompileSession], CommandResult]] = {
            'Page': self._cmd_page,
            'Bg': self._cmd_bg,
            'Row': self._cmd_row,
            'Column': self._cmd_column,
            'Card': self._cmd_card,
            'Var': self._cmd_var,
            'OnClick': self._cmd_on_click,
            'Set': self._cmd_set,
            'Alert': self._cmd_alert,
            'Space': self._cmd_space,
        }

    def preprocess(self, source: str) -> List[str]:
        """
        Splits source into logical lines.
        Inline blocks are unfolded, so `Row { Text "a" }` becomes
        `Row {`, `Text "a"` and `}`. Braces inside double quotes are text.
        """
        lines: List[str] = []
        for raw_line in source.split('\n'):
            line = raw_line.strip()
            if line.startswith(COMMENT_PREFIX) or (BLOCK_OPEN not in line and BLOCK_CLOSE not in line):
                lines.append(line)
                continue
            lines.extend(self._unfold_braces(line))
        return lines

    def _unfold_braces(self, line: str) -> List[str]:
        """Breaks a line after every unquoted '{' and around every unquoted '}'."""
        segments: List[str] = []
        current = ''
        in_quotes = False
        for index, char in enumerate(line):
            # A quote with no closing partner is not a string, as in tokenize()
            if char == '"' and (in_quotes or '"' in line[index + 1:]):
                in_quotes = not in_quotes
            elif char == '"':
                continue
            if in_quotes:
                current += char
            elif char == BLOCK_OPEN:
                segments.append(current + char)
                current = ''
            elif char == BLOCK_CLOSE:
                segments.extend([current, BLOCK_CLOSE])
                current = ''
            else:
                current += char
        segments.append(current)
        return [segment.strip() for segment in segments if segment.strip()]

    def compile(self, source: str) -> str:
        """Compiles Moe source code to a complete HTML document."""
        # Fresh state for every run
        session = CompileSession()
        html_output = ''

        for raw_line in self.preprocess(source):
            html_output += self._process_line(raw_line.strip(), session)

        # Close any blocks left open, innermost first
        for tag in session.drain_blocks():
            if tag:
                logger.debug("Auto-closing <%s> at end of input", tag)
                html_output += f"</{tag}>\n"

        return wrap_in_boilerplate(html_output, session.scripts, self.lang, self.direction)

    def _process_line(self, line: str, session: CompileSession) -> str:
        """Classifies and handles one trimmed line. Returns the markup it produces."""
        if not line or line.startswith(COMMENT_PREFIX):
            return ''

        # --- Style line: Name.prop = value ---
        # Checked before tokenizing; the name is ignored and the style goes to the next element
        if '.' in line and '=' in line:
            match = PROPERTY_LINE.match(line)
            if match:
                _, prop, value = match.groups()
                session.add_style(prop, strip_quotes(value))
                return ''

        # --- Block close ---
        if line == BLOCK_CLOSE:
            tag = session.close_block()
            if tag is None:
                logger.debug("Ignoring '}' with no open block")
                return ''
            return f"</{tag}>\n" if tag else ''

        # --- Command, possibly opening a block ---
        is_block = line.endswith(BLOCK_OPEN)
        if is_block:
            line = line[:-1].strip()

        tokens = tokenize(line)
        if not tokens:
            if is_block:
                session.open_block(BLOCK_MARKER)
            return ''

        cmd = tokens[0].text
        result = self._handle_command(cmd, parse_args(tokens[1:]), is_block, session)

        if result.js:
            session.scripts.append(result.js)
        if is_block:
            session.open_block(result.tag or BLOCK_MARKER)
        return result.html + '\n' if result.html else ''

    def _handle_command(self, cmd: str, args: Arguments, is_block: bool,
                        session: CompileSession) -> CommandResult:
        """Resolves cmd against the element table first, then the logic commands."""
        if cmd in HTML_TAGS:
            return self._element(cmd, args, is_block, session)

        handler = self.logic_commands.get(cmd)
        if handler is not None:
            return handler(args, is_block, session)

        logger.debug("Unknown command %r", cmd)
        return CommandResult(html=f"<!-- Moe: {cmd} -->")

    # --- Element commands ---

    def _element(self, cmd: str, args: Arguments, is_block: bool,
                 session: CompileSession) -> CommandResult:
        """Emits the HTML element mapped to cmd."""
        tag = HTML_TAGS[cmd]
        inner = args.param(0)
        attrs = ''
        consumed = RESERVED_ATTRS

        if cmd == 'Title':
            tag = f"h{args.attrs.get('size') or 1}"
        elif cmd == 'Link':
            attrs += f' href="{args.param(0)}"'
            inner = args.param(1)
        elif cmd == 'Image':
            attrs += f' src="{args.attrs.get("src") or args.param(0)}"'
            inner = ''
        elif cmd == 'Input':
            attrs += f' type="{args.attrs.get("type") or "text"}" placeholder="{args.attrs.get("placeholder") or args.param(0)}"'
            inner = ''
            consumed = RESERVED_ATTRS | {'placeholder'}
        elif cmd in ('Checkbox', 'Radio'):
            attrs += f' type="{cmd.lower()}"'

        # Custom attributes
        for key, value in args.attrs.items():
            if key not in consumed:
                attrs += f' {key}="{value}"'

        element_id = args.attrs.get('id') or session.next_id()
        style = session.take_styles()
        html = f'<{tag} id="{element_id}" style="{style}"{attrs} class="moe-element moe-{cmd.lower()}">{inner}'
        if not is_block and tag not in VOID_TAGS:
            html += f"</{tag}>"

        session.last_element_id = element_id
        return CommandResult(html=html, tag=tag)

    # --- Logic and layout commands ---

    def _cmd_page(self, args: Arguments, is_block: bool, session: CompileSession) -> CommandResult:
        return CommandResult()

    def _cmd_bg(self, args: Arguments, is_block: bool, session: CompileSession) -> CommandResult:
        return CommandResult(html=f"<style>body {{ background-color: {args.param(0)}; }}</style>")

    def _container(self, css_class: str, element_id: str, is_block: bool,
                   session: CompileSession) -> CommandResult:
        """Opens a layout <div>; closes it right away when no block follows."""
        html = f'<div id="{element_id}" class="{css_class}" style="{session.take_styles()}">'
        if not is_block:
            html += '</div>'
        return CommandResult(html=html, tag='div')

    def _cmd_row(self, args: Arguments, is_block: bool, session: CompileSession) -> CommandResult:
        return self._container('moe-row', session.next_id(), is_block, session)

    def _cmd_column(self, args: Arguments, is_block: bool, session: CompileSession) -> CommandResult:
        return self._container('moe-col', session.next_id(), is_block, session)

    def _cmd_card(self, args: Arguments, is_block: bool, session: CompileSession) -> CommandResult:
        element_id = args.attrs.get('id') or session.next_id()
        session.last_element_id = element_id
        return self._container('moe-card', element_id, is_block, session)

    def _cmd_space(self, args: Arguments, is_block: bool, session: CompileSession) -> CommandResult:
        """Spacer div. It is not addressable and leaves pending styles for the next element."""
        return CommandResult(html=f'<div style="height: {args.param(0, "20")}px; width: 100%;"></div>')

    def _cmd_var(self, args: Arguments, is_block: bool, session: CompileSession) -> CommandResult:
        name = args.param(0)
        if not name:
            logger.debug("Var without a name, skipped")
            return CommandResult()
        return CommandResult(js=script.assign_global(name, args.param(1, '0')))

    def _cmd_on_click(self, args: Arguments, is_block: bool, session: CompileSession) -> CommandResult:
        if not session.bind_event('click'):
            logger.debug("OnClick with no preceding element, ignored")
        return CommandResult(html='<!-- Event: OnClick -->')

    def _cmd_set(self, args: Arguments, is_block: bool, session: CompileSession) -> CommandResult:
        """
        Set target value

        With ++, -- or += in value, the expression runs against the global
        namespace and the variable named by target (up to its first '.') is
        displayed. Otherwise a quoted value is displayed literally and a bare
        name is read from the global namespace. The result is written into
        the element whose id is target.
        """
        target = args.param(0)
        if not target:
            logger.debug("Set without a target, skipped")
            return CommandResult()

        value_token = args.raw_params[1] if len(args.raw_params) > 1 else None
        value = strip_quotes(value_token.text) if value_token else ''

        if script.is_compound(value):
            statement = (f"{script.qualify_identifiers(value)}; "
                         + script.show_text(target, script.global_ref(target.split('.')[0])))
        elif value_token is None or value_token.quoted or not value:
            statement = script.show_text(target, f'"{value}"')
        else:
            statement = script.show_text(target, script.global_ref(value))

        return CommandResult(js=self._deferred(statement, session, scoped=True))

    def _cmd_alert(self, args: Arguments, is_block: bool, session: CompileSession) -> CommandResult:
        return CommandResult(js=self._deferred(script.alert(args.param(0)), session))

    def _deferred(self, statement: str, session: CompileSession, scoped: bool = False) -> str:
        """Attaches statement to the pending event binding, if there is one, and clears it."""
        event = session.take_event()
        if event is not None:
            return script.add_listener(event.target_id, event.event_type, statement)
        return script.scoped(statement) if scoped else statement
