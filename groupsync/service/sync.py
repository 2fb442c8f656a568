"""
Keeps the member records cached inside group documents consistent with the
users' profiles.

Both entry points rewrite a group's whole `members` array after reading it.
If another write to the same array lands in between, the later write wins
and the earlier change to the array is lost.
"""

import asyncio

from structlog.typing import FilteringBoundLogger

from groupsync.core.group import GroupData, MemberData
from groupsync.core.identity import UserIdentity, resolve_display_name
from groupsync.database.store import DocumentStore

from . import groups as groups_service


async def ensure_creator_in_group(
    group_id: str,
    creator: UserIdentity,
    store: DocumentStore,
    log: FilteringBoundLogger,
) -> None:
    """
    Make sure the creator of a group appears in its member list with their
    current name and photo.

    Parameters
    ----------
    group_id: str
        The ID of the group.
    creator: UserIdentity
        The creator's current profile.
    store: DocumentStore
        The document store.
    log: FilteringBoundLogger
        Logger instance.

    Notes
    -----
    A group that does not exist is skipped silently. An existing record for
    the creator keeps any other fields (e.g. `bio`); its photo is cleared if
    the creator no longer has one.
    """
    log = log.bind(group_id=group_id, user_id=creator.user_id)
    group = await groups_service.read_by_id(group_id=group_id, store=store, log=log)

    if group is None:
        return

    name = resolve_display_name(creator)
    index = group.find_member(creator.user_id)

    if index is None:
        group.members.append(
            MemberData(
                user_id=creator.user_id,
                name=name,
                photo_url=creator.photo_url or None,
            )
        )
        event = "sync.creator_added"
    else:
        group.members[index] = group.members[index].model_copy(
            update={"name": name, "photo_url": creator.photo_url or None}
        )
        event = "sync.creator_refreshed"

    await groups_service.replace_members(group=group, store=store)
    await log.ainfo(event)


async def ensure_creator_in_all_groups(
    groups: list[GroupData],
    creator: UserIdentity,
    store: DocumentStore,
    log: FilteringBoundLogger,
) -> None:
    """
    Run `ensure_creator_in_group` concurrently for each of `groups` that was
    created by `creator`. The first failure is raised once every branch has
    been started; writes that already completed are kept.
    """
    log = log.bind(user_id=creator.user_id)
    created = [group for group in groups if group.created_by == creator.user_id]

    await log.adebug("sync.creator_groups", number_of_groups=len(created))

    await asyncio.gather(
        *(
            ensure_creator_in_group(
                group_id=group.id, creator=creator, store=store, log=log
            )
            for group in created
        )
    )


async def sync_user_profile(
    user_id: str,
    display_name: str,
    photo_url: str | None,
    store: DocumentStore,
    log: FilteringBoundLogger,
) -> None:
    """
    Copy a user's new name and photo into their member record in every
    active group they belong to. Groups the user is not in are not written.

    Parameters
    ----------
    user_id: str
        The user whose profile changed.
    display_name: str
        The new display name.
    photo_url: str | None
        The new photo. None removes the photo from the member records.
    store: DocumentStore
        The document store.
    log: FilteringBoundLogger
        Logger instance.
    """
    log = log.bind(user_id=user_id)

    async def sync_one(group: GroupData) -> bool:
        index = group.find_member(user_id)
        if index is None:
            return False

        group.members[index] = group.members[index].model_copy(
            update={"name": display_name, "photo_url": photo_url or None}
        )
        await groups_service.replace_members(group=group, store=store)
        return True

    groups = await groups_service.get_group_list(store=store, log=log)
    synced = await asyncio.gather(*(sync_one(group) for group in groups))

    await log.ainfo("sync.profile_synced", number_of_groups=sum(synced))
