# Style tokens shared by the overlay engine and the listings.

RESET = "\033[0m"
PATH_CODE = "38;5;43"
SERVICE_CODE = "38;5;111"


def style_token(code: str) -> str:
    """Builds an SGR escape sequence from a code such as '38;5;43'."""
    return f"\033[{code}m" if code else ""


PATH_STYLE = style_token(PATH_CODE)
SERVICE_STYLE = style_token(SERVICE_CODE)
