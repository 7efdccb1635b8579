from datetime import datetime

_SIZES = ["Bytes", "KB", "MB", "GB"]


def format_bytes(size: int) -> str:
    if size <= 0:
        return "0 Bytes"
    value = float(size)
    i = 0
    while value >= 1024 and i < len(_SIZES) - 1:
        value /= 1024
        i += 1
    # 32.0 -> "32", 1.5 -> "1.5"
    return f"{round(value, 2):g} {_SIZES[i]}"


def format_date(value: str | datetime | None) -> str:
    if not value:
        return "No date"
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return "Invalid date"
    return value.strftime("%b %d, %Y, %I:%M %p")


def truncate_text(text: str, max_length: int = 100) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def get_file_extension(filename: str) -> str:
    if "." not in filename:
        return ""
    return filename.rsplit(".", 1)[-1].lower()


def capitalize_first(text: str) -> str:
    return text[:1].upper() + text[1:]
