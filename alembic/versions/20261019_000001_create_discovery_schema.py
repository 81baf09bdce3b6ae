"""Create the discovery schema.

Revision ID: 20261019_000001
Revises:
Create Date: 2026-10-19 00:00:01
"""

from alembic import op  # type: ignore[attr-defined]
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "20261019_000001"
down_revision = None
branch_labels = None
depends_on = None


podcast_status_enum = postgresql.ENUM(
    "draft", "published", "archived", name="podcaststatus", create_type=False
)
episode_status_enum = postgresql.ENUM(
    "draft", "scheduled", "published", "archived", name="episodestatus", create_type=False
)
episode_order_enum = postgresql.ENUM(
    "newest_first", "oldest_first", name="episodeorder", create_type=False
)


def upgrade() -> None:
    bind = op.get_bind()
    for enum_type in (podcast_status_enum, episode_status_enum, episode_order_enum):
        enum_type.create(bind, checkfirst=True)

    op.create_table(
        "categories",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("slug", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("parent_id", sa.Integer(), sa.ForeignKey("categories.id"), nullable=True),
    )
    op.create_index("ix_categories_slug", "categories", ["slug"], unique=True)
    op.create_index("ix_categories_parent_id", "categories", ["parent_id"])

    op.create_table(
        "podcasts",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("owner_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column(
            "category_ids",
            postgresql.ARRAY(sa.Integer()),
            nullable=False,
            server_default=sa.text("'{}'::integer[]"),
        ),
        sa.Column(
            "tags",
            postgresql.ARRAY(sa.String()),
            nullable=False,
            server_default=sa.text("'{}'::varchar[]"),
        ),
        sa.Column("cover_url", sa.String(), nullable=False),
        sa.Column("language", sa.String(), nullable=False),
        sa.Column("status", podcast_status_enum, nullable=False),
        sa.Column("explicit", sa.Boolean(), nullable=False),
        sa.Column("episode_order", episode_order_enum, nullable=False),
        sa.Column("website_url", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.Column("archived_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_podcasts_owner_id", "podcasts", ["owner_id"])
    op.create_index("ix_podcasts_status", "podcasts", ["status"])
    op.create_index("ix_podcasts_created_at", "podcasts", ["created_at"])
    op.create_index("ix_podcasts_updated_at", "podcasts", ["updated_at"])
    op.create_index("ix_podcasts_archived_at", "podcasts", ["archived_at"])
    op.create_index(
        "ix_podcasts_category_ids", "podcasts", ["category_ids"], postgresql_using="gin"
    )
    op.create_index("ix_podcasts_tags", "podcasts", ["tags"], postgresql_using="gin")

    op.create_table(
        "episodes",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("podcast_id", sa.Integer(), sa.ForeignKey("podcasts.id"), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("duration_seconds", sa.Integer(), nullable=False),
        sa.Column("season_number", sa.Integer(), nullable=True),
        sa.Column("episode_number", sa.Integer(), nullable=True),
        sa.Column("show_notes", sa.String(), nullable=True),
        sa.Column("audio_url", sa.String(), nullable=False),
        sa.Column("cover_url", sa.String(), nullable=True),
        sa.Column(
            "category_ids",
            postgresql.ARRAY(sa.Integer()),
            nullable=False,
            server_default=sa.text("'{}'::integer[]"),
        ),
        sa.Column("status", episode_status_enum, nullable=False),
        sa.Column("published_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("archived_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_episodes_podcast_id", "episodes", ["podcast_id"])
    op.create_index("ix_episodes_status", "episodes", ["status"])
    op.create_index("ix_episodes_published_at", "episodes", ["published_at"])
    op.create_index("ix_episodes_archived_at", "episodes", ["archived_at"])

    # Weighted full-text vectors maintained by Postgres itself.
    op.execute(
        "ALTER TABLE podcasts ADD COLUMN search_vector tsvector GENERATED ALWAYS AS ("
        "setweight(to_tsvector('english'::regconfig, coalesce(title, '')), 'A') || "
        "setweight(to_tsvector('english'::regconfig, coalesce(description, '')), 'B')"
        ") STORED"
    )
    op.execute(
        "ALTER TABLE episodes ADD COLUMN search_vector tsvector GENERATED ALWAYS AS ("
        "setweight(to_tsvector('english'::regconfig, coalesce(title, '')), 'A') || "
        "setweight(to_tsvector('english'::regconfig, coalesce(description, '')), 'B') || "
        "setweight(to_tsvector('english'::regconfig, coalesce(show_notes, '')), 'C')"
        ") STORED"
    )
    op.create_index(
        "ix_podcasts_search_vector", "podcasts", ["search_vector"], postgresql_using="gin"
    )
    op.create_index(
        "ix_episodes_search_vector", "episodes", ["search_vector"], postgresql_using="gin"
    )

    op.create_table(
        "play_events",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("episode_id", sa.Integer(), sa.ForeignKey("episodes.id"), nullable=False),
        sa.Column("podcast_id", sa.Integer(), sa.ForeignKey("podcasts.id"), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("listened_seconds", sa.Integer(), nullable=False),
        sa.Column("device_info", sa.String(), nullable=True),
        sa.Column("geo_country", sa.String(length=2), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_play_events_episode_id", "play_events", ["episode_id"])
    op.create_index("ix_play_events_podcast_id", "play_events", ["podcast_id"])
    op.create_index("ix_play_events_user_id", "play_events", ["user_id"])
    op.create_index("ix_play_events_created_at", "play_events", ["created_at"])

    op.create_table(
        "listening_progress",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("episode_id", sa.Integer(), sa.ForeignKey("episodes.id"), nullable=False),
        sa.Column("position_seconds", sa.Integer(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint(
            "user_id", "episode_id", name="uq_listening_progress_user_episode"
        ),
    )
    op.create_index("ix_listening_progress_user_id", "listening_progress", ["user_id"])
    op.create_index(
        "ix_listening_progress_updated_at", "listening_progress", ["updated_at"]
    )

    op.create_table(
        "subscriptions",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("podcast_id", sa.Integer(), sa.ForeignKey("podcasts.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("user_id", "podcast_id", name="uq_subscriptions_user_podcast"),
    )
    op.create_index("ix_subscriptions_user_id", "subscriptions", ["user_id"])
    op.create_index("ix_subscriptions_podcast_id", "subscriptions", ["podcast_id"])

    op.create_table(
        "follows",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("follower_id", sa.Integer(), nullable=False),
        sa.Column("following_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("follower_id", "following_id", name="uq_follows_pair"),
    )
    op.create_index("ix_follows_follower_id", "follows", ["follower_id"])
    op.create_index("ix_follows_following_id", "follows", ["following_id"])

    op.create_table(
        "featured_podcasts",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column(
            "podcast_id",
            sa.Integer(),
            sa.ForeignKey("podcasts.id"),
            nullable=False,
            unique=True,
        ),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_featured_podcasts_order", "featured_podcasts", ["order"])


def downgrade() -> None:
    for table in (
        "featured_podcasts",
        "follows",
        "subscriptions",
        "listening_progress",
        "play_events",
        "episodes",
        "podcasts",
        "categories",
    ):
        op.execute(sa.text(f"DROP TABLE IF EXISTS {table} CASCADE"))

    bind = op.get_bind()
    for enum_type in (episode_order_enum, episode_status_enum, podcast_status_enum):
        enum_type.drop(bind, checkfirst=True)
