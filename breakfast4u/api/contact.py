"""
Contact form API endpoints
"""
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from breakfast4u.api.auth import require_roles
from breakfast4u.config import get_settings
from breakfast4u.database import get_db
from breakfast4u.models.contact import Contact, ContactCategory, ContactPriority, ContactStatus
from breakfast4u.models.user import User, UserRole
from breakfast4u.schemas.common import envelope, paginated
from breakfast4u.schemas.contact import (
    ContactCreate, ContactUpdate, ContactResponse, ContactDetailResponse
)
from breakfast4u.services import email_templates
from breakfast4u.services.access import Actor
from breakfast4u.services.email_service import notify
from breakfast4u.utils.db_compat import icontains
from breakfast4u.utils.errors import NotFoundError
from breakfast4u.utils.helpers import utcnow
from breakfast4u.utils.logger import get_logger
from breakfast4u.utils.pagination import Page, default_page, paginate

settings = get_settings()
logger = get_logger(__name__)

router = APIRouter()

admin_only = require_roles(UserRole.ADMIN)


def _detail_query():
    return select(Contact).options(
        selectinload(Contact.assigned_to),
        selectinload(Contact.responded_by),
    )


async def _load_contact(db: AsyncSession, contact_id: int) -> Contact:
    result = await db.execute(_detail_query().where(Contact.id == contact_id))
    contact = result.scalar_one_or_none()
    if not contact:
        raise NotFoundError("Contact message not found")
    return contact


@router.post("/", status_code=201)
async def submit_contact_form(
    data: ContactCreate,
    db: AsyncSession = Depends(get_db),
):
    """Public contact form. Emails are best-effort and never fail the submission."""
    contact = Contact(**data.model_dump())
    db.add(contact)
    await db.commit()
    await db.refresh(contact)
    logger.info(f"Contact message {contact.id} received ({contact.category.value})")

    await notify(contact.email, email_templates.contact_confirmation(contact.name, contact.subject))
    await notify(
        settings.ADMIN_EMAIL or settings.SMTP_USER,
        email_templates.contact_admin_notification(
            name=contact.name,
            email=contact.email,
            phone=contact.phone,
            category=contact.category.value,
            subject=contact.subject,
            message=contact.message,
            submitted_at=contact.created_at or utcnow(),
        ),
    )

    return envelope(
        ContactResponse.model_validate(contact),
        message="Your message has been sent successfully. We will get back to you soon!",
    )


@router.get("/")
async def list_contact_messages(
    status: Optional[ContactStatus] = None,
    category: Optional[ContactCategory] = None,
    priority: Optional[ContactPriority] = None,
    search: Optional[str] = None,
    page: Page = Depends(default_page),
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(admin_only),
):
    query = _detail_query()
    if status:
        query = query.where(Contact.status == status)
    if category:
        query = query.where(Contact.category == category)
    if priority:
        query = query.where(Contact.priority == priority)
    if search:
        query = query.where(or_(
            icontains(Contact.name, search),
            icontains(Contact.email, search),
            icontains(Contact.subject, search),
        ))
    query = query.order_by(Contact.created_at.desc(), Contact.id.desc())

    contacts, total = await paginate(db, query, page)

    counts = await db.execute(
        select(Contact.status, func.count(Contact.id)).group_by(Contact.status)
    )
    status_counts = [{"status": s.value, "count": c} for s, c in counts.all()]

    return paginated(
        [ContactDetailResponse.model_validate(c) for c in contacts],
        total,
        page.page,
        page.limit,
        statusCounts=status_counts,
    )


@router.get("/{contact_id}")
async def get_contact_message(
    contact_id: int,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(admin_only),
):
    contact = await _load_contact(db, contact_id)
    return envelope(ContactDetailResponse.model_validate(contact))


@router.put("/{contact_id}")
async def update_contact_message(
    contact_id: int,
    data: ContactUpdate,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(admin_only),
):
    """Triage a message; a response is emailed to the submitter (best-effort)"""
    contact = await _load_contact(db, contact_id)

    if data.status:
        contact.status = data.status
    if data.priority:
        contact.priority = data.priority
    if data.assigned_to_id:
        if not await db.get(User, data.assigned_to_id):
            raise NotFoundError("Assignee not found")
        contact.assigned_to_id = data.assigned_to_id
    if data.response:
        contact.response = data.response
        contact.responded_at = utcnow()
        contact.responded_by_id = actor.id

    await db.commit()

    if data.response:
        await notify(
            contact.email,
            email_templates.contact_response(contact.name, contact.subject, contact.message, data.response),
        )

    db.expire(contact)
    contact = await _load_contact(db, contact_id)
    return envelope(ContactDetailResponse.model_validate(contact), message="Contact message updated successfully")


@router.delete("/{contact_id}")
async def delete_contact_message(
    contact_id: int,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(admin_only),
):
    contact = await _load_contact(db, contact_id)
    await db.delete(contact)
    await db.commit()
    return envelope(message="Contact message deleted successfully")
