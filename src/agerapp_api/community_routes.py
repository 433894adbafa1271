"""
Community directory and membership routes
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

from .auth import get_current_user
from .database import get_db, User, Community, CommunityMember
from .exceptions import api_error, send_response
from .middleware.uploads import has_file, save_image
from .schemas import CommunityMembersRequest, PageParams, like_pattern, order_direction, page_params, paginate
from .services.storage_provider import delete_local_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/communities", tags=["communities"])

COMMUNITY_FIELDS = (
    "name",
    "state",
    "country",
    "description",
    "whatsapp_link",
    "phone_number",
    "email",
    "instagram_link",
    "facebook_link",
)


def _get_community(db: Session, community_id: str) -> Community:
    community = db.query(Community).filter(Community.id == community_id).first()
    if community is None:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Community not found")
    return community


def _membership(db: Session, community_id: str, user_id: str) -> Optional[CommunityMember]:
    return (
        db.query(CommunityMember)
        .filter(CommunityMember.community_id == community_id, CommunityMember.user_id == user_id)
        .first()
    )


@router.get("")
async def list_communities(
    params: PageParams = Depends(page_params),
    keyword: Optional[str] = Query(None),
    order: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Communities by name keyword; pictures are left out of the listing"""
    query = db.query(Community)
    if keyword:
        query = query.filter(Community.name.ilike(like_pattern(keyword), escape="\\"))

    created = Community.created_at.asc() if order_direction(order) == "asc" else Community.created_at.desc()
    result = paginate(
        query.order_by(created),
        params,
        lambda community: community.to_dict(include_picture=False),
    )
    return send_response(status.HTTP_200_OK, "Communities fetched", result)


@router.post("/create")
async def create_community(
    name: Optional[str] = Form(None),
    state: Optional[str] = Form(None),
    country: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    whatsapp_link: Optional[str] = Form(None),
    phone_number: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    instagram_link: Optional[str] = Form(None),
    facebook_link: Optional[str] = Form(None),
    picture: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not name:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Community name is required")

    picture_url = await save_image(picture, "communities") if has_file(picture) else None

    community = Community(
        name=name,
        state=state,
        country=country,
        description=description,
        whatsapp_link=whatsapp_link,
        phone_number=phone_number,
        email=email,
        instagram_link=instagram_link,
        facebook_link=facebook_link,
        picture=picture_url,
        created_by=current_user.id,
    )
    db.add(community)
    db.commit()
    db.refresh(community)
    logger.info(f"Community {community.id} created by {current_user.id}")
    return send_response(status.HTTP_200_OK, "Community created successfully", community.to_dict())


@router.put("/edit/{community_id}")
async def edit_community(
    community_id: str,
    name: Optional[str] = Form(None),
    state: Optional[str] = Form(None),
    country: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    whatsapp_link: Optional[str] = Form(None),
    phone_number: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    instagram_link: Optional[str] = Form(None),
    facebook_link: Optional[str] = Form(None),
    picture: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Creator-only update; fields left out keep their value"""
    community = _get_community(db, community_id)
    if community.created_by != current_user.id:
        raise api_error(status.HTTP_403_FORBIDDEN, "Only the creator can edit this community")

    values = {
        "name": name,
        "state": state,
        "country": country,
        "description": description,
        "whatsapp_link": whatsapp_link,
        "phone_number": phone_number,
        "email": email,
        "instagram_link": instagram_link,
        "facebook_link": facebook_link,
    }
    for field in COMMUNITY_FIELDS:
        if values[field] is not None:
            setattr(community, field, values[field])

    old_picture = None
    if has_file(picture):
        old_picture = community.picture
        community.picture = await save_image(picture, "communities")

    db.commit()
    delete_local_upload("communities", old_picture)
    db.refresh(community)
    return send_response(status.HTTP_200_OK, "Community updated successfully", community.to_dict())


@router.post("/join/{community_id}")
async def join_community(
    community_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    _get_community(db, community_id)
    if _membership(db, community_id, current_user.id) is not None:
        raise api_error(status.HTTP_400_BAD_REQUEST, "User already a member of this community")

    membership = CommunityMember(community_id=community_id, user_id=current_user.id)
    db.add(membership)
    db.commit()
    db.refresh(membership)
    return send_response(status.HTTP_200_OK, "Joined community successfully", membership.to_dict())


@router.post("/exit/{community_id}")
async def exit_community(
    community_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    membership = _membership(db, community_id, current_user.id)
    if membership is None:
        raise api_error(status.HTTP_400_BAD_REQUEST, "User is not a member of this community")

    db.delete(membership)
    db.commit()
    return send_response(status.HTTP_200_OK, "Exited community successfully")


@router.get("/members/{community_id}")
async def community_members(
    community_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    members = (
        db.query(User)
        .join(CommunityMember, CommunityMember.user_id == User.id)
        .filter(CommunityMember.community_id == community_id)
        .order_by(CommunityMember.created_at.asc())
        .all()
    )
    return send_response(status.HTTP_200_OK, "Community members fetched", [user.to_summary() for user in members])


@router.post("/members/{community_id}")
async def add_community_members(
    community_id: str,
    body: CommunityMembersRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Add several users at once

    Every id must belong to an existing user; users already in the
    community are reported as skipped.
    """
    if not body.user_ids:
        raise api_error(status.HTTP_400_BAD_REQUEST, "userIds must be a non-empty array")

    _get_community(db, community_id)

    user_ids = list(dict.fromkeys(body.user_ids))
    found = {row[0] for row in db.query(User.id).filter(User.id.in_(user_ids)).all()}
    missing = [user_id for user_id in user_ids if user_id not in found]
    if missing:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Some users were not found", missing)

    skipped = [
        row[0]
        for row in db.query(CommunityMember.user_id)
        .filter(CommunityMember.community_id == community_id, CommunityMember.user_id.in_(user_ids))
        .all()
    ]
    added = [
        CommunityMember(community_id=community_id, user_id=user_id)
        for user_id in user_ids
        if user_id not in skipped
    ]
    db.add_all(added)
    db.commit()

    logger.info(f"Added {len(added)} members to community {community_id}")
    return send_response(
        status.HTTP_200_OK,
        "Community members added",
        {"added": [member.to_dict() for member in added], "skipped": skipped},
    )
