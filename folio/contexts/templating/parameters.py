"""
Shortcode Parameter Binding

Maps an invocation's arguments onto a definition's declared parameters.
Every failure here is a content error in the document, not a fault in FOLIO.
"""

from typing import Any, Dict

from folio.contexts.templating.exceptions import ShortcodeParameterError
from folio.contexts.templating.shortcode_structure import (
    ShortcodeDefinition,
    ShortcodeInvocation,
)


def check_inner_policy(definition: ShortcodeDefinition, invocation: ShortcodeInvocation) -> None:
    """
    Enforce the definition's inner-body policy.

    Raises:
        ShortcodeParameterError: If a body is required but missing, or given but not accepted
    """
    if definition.inner == "required" and invocation.body is None:
        raise ShortcodeParameterError(
            f"Requires a body: close it with {{{{< /{definition.name} >}}}}",
            shortcode_name=definition.name,
            line=invocation.line,
            snippet=invocation.source,
        )
    if definition.inner == "none" and invocation.body is not None:
        raise ShortcodeParameterError(
            "Does not accept a body; use a standalone tag",
            shortcode_name=definition.name,
            line=invocation.line,
            snippet=invocation.source,
        )


def bind_parameters(
    definition: ShortcodeDefinition, invocation: ShortcodeInvocation
) -> Dict[str, Any]:
    """
    Bind invocation arguments to declared parameters.

    Positional arguments fill declared parameters in order; named arguments
    fill parameters by name; omitted optional parameters take their default.
    Undeclared shortcodes (no shortcode.yaml) pass named arguments through as-is.

    Args:
        definition: The shortcode's definition
        invocation: The invocation found in the document

    Returns:
        Dict of parameter name -> value, one entry per declared parameter

    Raises:
        ShortcodeParameterError: On surplus positional arguments, unknown named
                                 arguments, missing required parameters, or an
                                 inner-body policy violation

    Example:
        >>> # cv_entry declares: title (required), organization (required), period, location
        >>> bind_parameters(cv_entry, parse('{{< cv_entry "Engineer" "Acme" >}}'))
        {'title': 'Engineer', 'organization': 'Acme', 'period': '', 'location': ''}
    """
    check_inner_policy(definition, invocation)

    if not definition.declared:
        return dict(invocation.named)

    names = definition.parameter_names

    def fail(message: str) -> ShortcodeParameterError:
        return ShortcodeParameterError(
            message,
            shortcode_name=definition.name,
            line=invocation.line,
            snippet=invocation.source,
        )

    if len(invocation.parameters) > len(names):
        raise fail(
            f"Takes at most {len(names)} positional arguments "
            f"({', '.join(names) or 'none'}), got {len(invocation.parameters)}"
        )

    bound: Dict[str, Any] = dict(zip(names, invocation.parameters))

    unknown = [key for key in invocation.named if key not in names]
    if unknown:
        raise fail(f"Unknown parameter(s) {unknown}. Declared parameters: {names}")
    bound.update(invocation.named)

    missing = [name for name in definition.required_parameters if name not in bound]
    if missing:
        raise fail(f"Missing required parameter(s): {', '.join(missing)}")

    for param in definition.parameters:
        if param.name not in bound:
            bound[param.name] = param.default

    # Declaration order, so templates and listings see a stable mapping
    return {name: bound[name] for name in names}
