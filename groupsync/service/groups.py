"""
Service layer for groups.
"""

import asyncio
from typing import Any

from structlog.typing import FilteringBoundLogger

from groupsync.core.group import (
    CreateGroupData,
    GroupData,
    MemberData,
    ModifyGroupContent,
)
from groupsync.database.store import DocumentStore

COLLECTION = "groups"


class GroupNotFoundError(Exception):
    pass


class DuplicateMemberError(Exception):
    pass


def to_group(document: dict[str, Any]) -> GroupData:
    return GroupData.model_validate(document)


async def create(
    created_by_user_id: str,
    group_data: CreateGroupData,
    store: DocumentStore,
    log: FilteringBoundLogger,
) -> str:
    """
    Create a new group.

    Parameters
    ----------
    created_by_user_id: str
        The user that created this group.
    group_data: CreateGroupData
        The descriptive content of the group and its initial members.
    store: DocumentStore
        The document store.
    log: FilteringBoundLogger
        Logger instance.

    Returns
    -------
    str
        The identifier assigned to the new group.

    Raises
    ------
    groupsync.database.store.StoreWriteError
        If the document could not be written.
    """
    group_id = await store.allocate_id(COLLECTION)

    log = log.bind(
        group_id=group_id,
        user_id=created_by_user_id,
        number_of_members=len(group_data.members),
    )

    now = store.now()

    document = {
        **group_data.to_document(),
        "createdBy": created_by_user_id,
        "isActive": True,
        "createdAt": now,
        "updatedAt": now,
    }

    await store.create(COLLECTION, group_id, document)
    await log.ainfo("group.created")

    return group_id


async def read_by_id(
    group_id: str,
    store: DocumentStore,
    log: FilteringBoundLogger,
) -> GroupData | None:
    """
    Read a group by its ID.

    Parameters
    ----------
    group_id: str
        The ID of the group to read.
    store: DocumentStore
        The document store.
    log: FilteringBoundLogger
        Logger instance.

    Returns
    -------
    GroupData | None
        The group, or None if no group has this ID. Inactive groups are
        still returned.
    """
    log = log.bind(group_id=group_id)
    document = await store.read(COLLECTION, group_id)

    if document is None:
        await log.ainfo("group.not_found")
        return None

    await log.adebug("group.found")
    return to_group(document)


async def get_group_list(
    store: DocumentStore,
    log: FilteringBoundLogger,
) -> list[GroupData]:
    """
    Get a list of all active groups. The order is whatever the store returns.
    """
    documents = await store.query(COLLECTION, {"isActive": True})
    groups = [to_group(document) for document in documents]
    await log.adebug("group.listed", number_of_groups=len(groups))
    return groups


async def get_groups_by_creator(
    user_id: str,
    store: DocumentStore,
    log: FilteringBoundLogger,
) -> list[GroupData]:
    """
    Get a list of the active groups created by `user_id`.
    """
    log = log.bind(created_by=user_id)
    documents = await store.query(
        COLLECTION, {"createdBy": user_id, "isActive": True}
    )
    groups = [to_group(document) for document in documents]
    await log.adebug("group.listed", number_of_groups=len(groups))
    return groups


async def get_groups_by_member(
    user_id: str,
    store: DocumentStore,
    log: FilteringBoundLogger,
) -> list[GroupData]:
    """
    Get a list of the active groups that `user_id` is a member of.

    Membership lives inside each group document, so this reads every active
    group and filters here. The cost grows with the number of active groups,
    not with the number of groups the user is in.
    """
    log = log.bind(for_user=user_id)
    groups = [
        group
        for group in await get_group_list(store=store, log=log)
        if group.has_member(user_id)
    ]
    await log.adebug("group.listed_by_member", number_of_groups=len(groups))
    return groups


async def update(
    group_id: str,
    content: ModifyGroupContent,
    store: DocumentStore,
    log: FilteringBoundLogger,
) -> None:
    """
    Merge the fields set on `content` into a group.

    Parameters
    ----------
    group_id: str
        The ID of the group.
    content: ModifyGroupContent
        The fields to change. Unset and None fields are left alone.
    store: DocumentStore
        The document store.
    log: FilteringBoundLogger
        Logger instance.

    Notes
    -----
    Updating a group that does not exist does nothing and does not raise;
    callers that care must check with `read_by_id` first.
    """
    fields = content.to_document()
    log = log.bind(group_id=group_id, fields=sorted(fields))

    updated = await store.update(
        COLLECTION, group_id, {**fields, "updatedAt": store.now()}
    )

    if updated:
        await log.ainfo("group.updated")
    else:
        await log.ainfo("group.update_missing")


async def deactivate(
    group_id: str,
    store: DocumentStore,
    log: FilteringBoundLogger,
) -> None:
    """
    Soft-delete a group. The document is kept, but no longer appears in any
    of the active group listings. Deactivating twice is harmless.
    """
    log = log.bind(group_id=group_id)

    updated = await store.update(
        COLLECTION, group_id, {"isActive": False, "updatedAt": store.now()}
    )

    if updated:
        await log.ainfo("group.deactivated")
    else:
        await log.ainfo("group.update_missing")


async def add_member(
    group_id: str,
    member: MemberData,
    store: DocumentStore,
    log: FilteringBoundLogger,
) -> None:
    """
    Add a user to a group.

    Parameters
    ----------
    group_id: str
        The ID of the group.
    member: MemberData
        The member record to add.
    store: DocumentStore
        The document store.
    log: FilteringBoundLogger
        Logger instance.

    Raises
    ------
    GroupNotFoundError
        If the group does not exist.
    DuplicateMemberError
        If the user is already a member of the group.

    Notes
    -----
    The member is appended with a set-union write rather than by rewriting
    the array, so two concurrent adds of different users both land. The
    duplicate check is made against a fresh read and can miss a concurrent
    add of the same user; the union write still keeps a single record.
    """
    log = log.bind(group_id=group_id, user_id=member.user_id)
    group = await read_by_id(group_id=group_id, store=store, log=log)

    if group is None:
        raise GroupNotFoundError(f"Group with id {group_id} not found")

    if group.has_member(member.user_id):
        await log.ainfo("group.user_already_member")
        raise DuplicateMemberError(
            f"User {member.user_id} is already a member of group {group_id}"
        )

    await store.array_union(
        COLLECTION,
        group_id,
        "members",
        [member.to_document()],
        {"updatedAt": store.now()},
    )
    await log.ainfo("group.user_added")


async def replace_members(group: GroupData, store: DocumentStore) -> None:
    """
    Write `group.members` back over the stored array, whatever it currently
    holds.
    """
    await store.update(
        COLLECTION,
        group.id,
        {"members": group.members_document(), "updatedAt": store.now()},
    )


async def update_member_photo(
    user_id: str,
    photo_url: str | None,
    store: DocumentStore,
    log: FilteringBoundLogger,
    display_name: str | None = None,
) -> None:
    """
    Refresh a user's cached photo, and optionally name, in every active group
    they are a member of.

    Parameters
    ----------
    user_id: str
        The user whose member records should change.
    photo_url: str | None
        The new photo. None leaves each record's current photo in place.
    store: DocumentStore
        The document store.
    log: FilteringBoundLogger
        Logger instance.
    display_name: str | None
        The new name. None or empty leaves each record's name in place.

    Notes
    -----
    Each group's whole `members` array is read, changed and written back.
    A concurrent change to the same array between the read and the write is
    lost.
    """
    log = log.bind(user_id=user_id)

    changes = {}
    if photo_url is not None:
        changes["photo_url"] = photo_url
    if display_name:
        changes["name"] = display_name

    async def update_one(group: GroupData):
        index = group.find_member(user_id)
        if index is None:
            return

        group.members[index] = group.members[index].model_copy(update=changes)
        await replace_members(group=group, store=store)

    groups = await get_group_list(store=store, log=log)
    await asyncio.gather(*(update_one(group) for group in groups))

    await log.ainfo(
        "group.member_photo_updated", changed_fields=sorted(changes)
    )
