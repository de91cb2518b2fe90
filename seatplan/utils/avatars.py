"""
Guest initials and placeholder avatars
"""

from urllib.parse import quote

def initials(name: str) -> str:
    """Up to two initials from the first two words, ``?`` when there are none"""
    parts = name.split()[:2]
    return "".join(part[0] for part in parts).upper() or "?"

def avatar_data_url(gender: str) -> str:
    """Inline SVG avatar used when a guest has no photo"""
    is_female = gender == "female"
    bg = "FCE7F3" if is_female else "DBEAFE"
    accent = "EC4899" if is_female else "2563EB"
    hair = "7C2D12" if is_female else "111827"
    shirt = "FB7185" if is_female else "60A5FA"
    if is_female:
        hair_path = f"<path d='M74 110c6-44 36-66 54-66s48 22 54 66c-10-16-28-30-54-30s-44 14-54 30Z' fill='#{hair}' opacity='.9'/>"
    else:
        hair_path = f"<path d='M82 92c18-34 72-34 92 0c-14-10-30-14-46-14s-32 4-46 14Z' fill='#{hair}' opacity='.9'/>"

    svg = (
        "<svg xmlns='http://www.w3.org/2000/svg' width='256' height='256' viewBox='0 0 256 256'>"
        f"<rect width='256' height='256' rx='64' fill='#{bg}'/>"
        "<circle cx='128' cy='106' r='56' fill='#F8D8C0'/>"
        f"{hair_path}"
        "<circle cx='107' cy='112' r='6' fill='#111827' opacity='.9'/>"
        "<circle cx='149' cy='112' r='6' fill='#111827' opacity='.9'/>"
        "<path d='M110 136c10 10 26 10 36 0' fill='none' stroke='#111827' stroke-width='6' stroke-linecap='round' opacity='.65'/>"
        f"<path d='M58 240c8-48 42-76 70-76s62 28 70 76' fill='#{shirt}' opacity='.85'/>"
        f"<path d='M78 170c14 18 30 26 50 26s36-8 50-26' fill='none' stroke='#{accent}' stroke-width='10' stroke-linecap='round' opacity='.35'/>"
        "</svg>"
    )
    return "data:image/svg+xml;charset=utf-8," + quote(svg, safe="")

def guest_avatar(guest) -> str:
    return guest.photo_url or avatar_data_url(guest.gender)
