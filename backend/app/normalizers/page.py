from .section import normalize_section

def normalize_page(page, admin=False, include_sections=True):
    sections = sorted(page.sections, key=lambda s: s.position)

    data = {
        "id": page.id,
        "title": page.title,
        "slug": page.slug,
    }

    if admin:
        data["status"] = page.status
        data["base_url"] = page.base_url

    if include_sections:
        if not admin:
            # Never-published sections have nothing live to show
            sections = [s for s in sections if s.published_content is not None]
        data["sections"] = [normalize_section(s, admin=admin) for s in sections]

    return data
