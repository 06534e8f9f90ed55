from app.extensions import db

def compact_order(items, order_field="position"):
    """
    Re-assigns sequential order values (1..N), keeping the current order.
    Ties keep their incoming order.
    """
    ordered = sorted(items, key=lambda item: getattr(item, order_field) or 0)

    for index, item in enumerate(ordered, start=1):
        setattr(item, order_field, index)

    db.session.flush()
    return ordered
