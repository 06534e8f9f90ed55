def normalize_section(section, admin=False):
    """
    Admin view carries both content versions and the lifecycle status;
    the public view only ever exposes what is live.
    """
    if not admin:
        return {
            "key": section.key,
            "component": section.component,
            "position": section.position,
            "content": section.published_content,
        }

    return {
        "id": section.id,
        "page_id": section.page_id,
        "key": section.key,
        "label": section.label,
        "component": section.component,
        "position": section.position,
        "status": section.status,
        "draft_content": section.draft_content or {},
        "published_content": section.published_content,
        "published_at": section.published_at.isoformat() if section.published_at else None,
        "updated_at": section.updated_at.isoformat() if section.updated_at else None,
    }
