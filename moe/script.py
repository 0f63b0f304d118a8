"""
Builders for the JavaScript statements the compiler emits.

Values are interpolated into the script text as written in the source,
without escaping. Every statement goes through one of these functions so
escaping can be introduced here without touching the dispatcher.
"""
import re

GLOBAL_NAMESPACE = 'window'

# String literals are matched first so their contents are left alone
_EXPRESSION_PART = re.compile(r"(\"[^\"]*\"|'[^']*')|(?<![\w.$])([A-Za-z_]\w*)")

COMPOUND_OPERATORS = ('++', '--', '+=')


def global_ref(name: str) -> str:
    return f"{GLOBAL_NAMESPACE}.{name}"


def is_compound(expression: str) -> bool:
    return any(op in expression for op in COMPOUND_OPERATORS)


def qualify_identifiers(expression: str) -> str:
    """
    Prefixes every bare identifier in expression with the global namespace.
    `count += step` becomes `window.count += window.step`; member accesses
    and existing `window.` prefixes are kept as they are.
    """
    def _replace(match: 're.Match') -> str:
        literal, name = match.groups()
        if literal is not None or name == GLOBAL_NAMESPACE:
            return match.group(0)
        return global_ref(name)

    return _EXPRESSION_PART.sub(_replace, expression)


def assign_global(name: str, value: str) -> str:
    return f"{global_ref(name)} = {value};"


def show_text(element_id: str, value_expr: str) -> str:
    """Writes value_expr into the text of the element with element_id, if it exists."""
    return f'const el = document.getElementById("{element_id}"); if(el) el.innerText = {value_expr};'


def alert(message: str) -> str:
    return f'alert("{message}");'


def scoped(statement: str) -> str:
    """Wraps statement in a block so its `const` declarations stay local."""
    return f"{{ {statement} }}"


def add_listener(element_id: str, event_type: str, statement: str) -> str:
    return f'document.getElementById("{element_id}").addEventListener("{event_type}", () => {{ {statement} }});'
