from typing import Optional

from sqlalchemy.orm import Session

from grouproster.app.models.parent import Parent


def upsert_parent(
    db: Session,
    *,
    name: str,
    phone: str,
    cash_receipt_number: Optional[str] = None,
) -> Parent:
    """
    Idempotent helper keyed by normalized phone:
    - If a parent with this phone exists, refresh the name (and receipt number when given).
    - Otherwise, create a new parent.
    """
    parent = db.query(Parent).filter(Parent.phone == phone).first()
    if parent:
        parent.name = name
        if cash_receipt_number:
            parent.cash_receipt_number = cash_receipt_number
        db.flush()
        return parent

    parent = Parent(
        name=name,
        phone=phone,
        cash_receipt_number=cash_receipt_number or None,
    )
    db.add(parent)
    db.flush()
    return parent


def get_parent_by_phone(db: Session, phone: str) -> Optional[Parent]:
    return db.query(Parent).filter(Parent.phone == phone).first()
