"""
Console output for integration_client debug mode.

Request/response panels rendered with Rich, plus masking helpers so that
credentials never reach the terminal or the log.
"""
from __future__ import annotations

import json
from typing import Any, Iterable, List, Optional, Tuple

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax

SENSITIVE_HEADERS = {"authorization", "proxy-authorization", "x-api-key", "cookie"}

console = Console()


def mask_sensitive(value: Optional[str], show_chars: int = 4) -> str:
    """
    Mask sensitive values for logging.

    Args:
        value: Value to mask
        show_chars: Number of characters to show before masking

    Returns:
        str: Masked value, or "<none>" for empty input
    """
    if not value:
        return "<none>"
    if len(value) <= show_chars:
        return "*" * len(value)
    return value[:show_chars] + "***"


def mask_auth_header(value: Optional[str]) -> str:
    """Mask an auth header value, keeping the scheme visible."""
    if not value:
        return "<none>"
    scheme, _, credentials = value.partition(" ")
    if credentials and scheme.lower() in ("bearer", "basic", "token"):
        return f"{scheme} {mask_sensitive(credentials)}"
    return mask_sensitive(value)


def mask_headers(
    headers: Iterable[Tuple[str, str]],
    extra_sensitive: Iterable[str] = (),
) -> List[Tuple[str, str]]:
    """Return headers with credential-bearing values masked."""
    sensitive = SENSITIVE_HEADERS | {name.lower() for name in extra_sensitive}
    return [
        (name, mask_auth_header(value) if name.lower() in sensitive else value)
        for name, value in headers
    ]


def format_body(body: Any) -> str:
    """Format body for pretty printing."""
    if body is None:
        return ""
    if isinstance(body, (dict, list)):
        return json.dumps(body, indent=2, ensure_ascii=False, default=str)
    if isinstance(body, bytes):
        try:
            return body.decode("utf-8")
        except UnicodeDecodeError:
            return f"<binary data: {len(body)} bytes>"
    return str(body)


def print_panel(content: str, title: Optional[str] = None) -> None:
    """Print content in a bordered panel."""
    console.print(Panel(content, title=title))


def print_syntax_panel(
    code: str,
    lexer: str = "json",
    title: Optional[str] = None,
    theme: str = "monokai",
) -> None:
    """Print syntax-highlighted text in a panel."""
    console.print(Panel(Syntax(code, lexer, theme=theme), title=title, expand=True))


def print_request(
    method: str,
    url: str,
    headers: Iterable[Tuple[str, str]],
    body: Any = None,
    sensitive_headers: Iterable[str] = (),
) -> None:
    """Print an outgoing request, masking credentials."""
    print_panel(f"[bold cyan]{method}[/bold cyan] {url}", title="[bold blue]Request[/bold blue]")
    for name, value in mask_headers(headers, sensitive_headers):
        console.print(f"  [bold]{name}:[/bold] {value}", highlight=False)
    if body:
        print_syntax_panel(format_body(body), title="[bold]Request Body[/bold]")


def print_response(
    url: str,
    status: Optional[int],
    headers: Optional[dict] = None,
    body: Any = None,
    error: Optional[str] = None,
) -> None:
    """Print a received response or a transport failure."""
    if error is not None:
        print_panel(f"[bold red]{error}[/bold red]", title=f"[bold red]Transport Error[/bold red] ({url})")
        return

    status_color = "green" if status is not None and 200 <= status < 300 else "red"
    print_panel(
        f"[bold {status_color}]{status}[/bold {status_color}]",
        title=f"[bold blue]Response[/bold blue] ({url})",
    )
    if headers:
        console.print("[bold]Headers:[/bold]", dict(headers))
    if body:
        lexer = "json" if isinstance(body, (dict, list)) else "text"
        print_syntax_panel(format_body(body), lexer=lexer, title="[bold]Response Body[/bold]")
