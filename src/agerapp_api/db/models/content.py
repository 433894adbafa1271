"""
Blog and community models
"""
from sqlalchemy import Column, String, Text, Boolean, Integer, DateTime, ForeignKey, UniqueConstraint

from ..base import Base, TimestampMixin, new_uuid, isoformat


class BlogPost(TimestampMixin, Base):
    __tablename__ = "blog_posts"

    id = Column(String(36), primary_key=True, default=new_uuid)
    title = Column(String, nullable=False)
    slug = Column(String, unique=True, nullable=False, index=True)
    excerpt = Column(Text, nullable=True)
    content = Column(Text, nullable=False)
    cover_image = Column(String, nullable=True)
    author_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    author_name = Column(String, nullable=True)
    is_published = Column(Boolean, default=True, nullable=False)
    published_at = Column(DateTime, nullable=True, index=True)
    views = Column(Integer, default=0, nullable=False)

    def to_summary(self) -> dict:
        """Fields shown in public listings"""
        return {
            "id": self.id,
            "title": self.title,
            "slug": self.slug,
            "excerpt": self.excerpt,
            "coverImage": self.cover_image,
            "authorName": self.author_name,
            "publishedAt": isoformat(self.published_at),
            "views": self.views,
        }

    def to_dict(self) -> dict:
        return {
            **self.to_summary(),
            "content": self.content,
            "authorId": self.author_id,
            "isPublished": bool(self.is_published),
            **self.timestamps(),
        }


class Community(TimestampMixin, Base):
    __tablename__ = "communities"

    id = Column(String(36), primary_key=True, default=new_uuid)
    name = Column(String, nullable=False, index=True)
    state = Column(String, nullable=True)
    country = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    whatsapp_link = Column(String, nullable=True)
    picture = Column(String, nullable=True)
    phone_number = Column(String, nullable=True)
    email = Column(String, nullable=True)
    instagram_link = Column(String, nullable=True)
    facebook_link = Column(String, nullable=True)
    created_by = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    def to_dict(self, include_picture: bool = True) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "state": self.state,
            "country": self.country,
            "description": self.description,
            "whatsapp_link": self.whatsapp_link,
            "phone_number": self.phone_number,
            "email": self.email,
            "instagram_link": self.instagram_link,
            "facebook_link": self.facebook_link,
            "created_by": self.created_by,
            **self.timestamps(),
        }
        if include_picture:
            data["picture"] = self.picture
        return data


class CommunityMember(TimestampMixin, Base):
    __tablename__ = "community_members"
    __table_args__ = (
        UniqueConstraint("community_id", "user_id", name="uq_community_members_community_user"),
    )

    id = Column(String(36), primary_key=True, default=new_uuid)
    community_id = Column(String(36), ForeignKey("communities.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "community_id": self.community_id,
            "user_id": self.user_id,
            **self.timestamps(),
        }
