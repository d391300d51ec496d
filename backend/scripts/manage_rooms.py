#!/usr/bin/env python3
"""
Room table maintenance.

List rooms, delete or archive single rooms, or clear the whole rooms table
for an environment.

Usage:
    uv run python scripts/manage_rooms.py --env dev list
    uv run python scripts/manage_rooms.py --env dev delete <room_id>
    uv run python scripts/manage_rooms.py --env dev delete-by-number 101
    uv run python scripts/manage_rooms.py --env dev archive <room_id>
    uv run python scripts/manage_rooms.py --env dev --dry-run clear-all
"""

import argparse
import os
import sys

from lilycrest_shared.models.room import Room
from lilycrest_shared.services.dynamodb import DynamoDBService
from lilycrest_shared.services.rooms import RoomRepository
from lilycrest_shared.utils.display import NOT_AVAILABLE, display_currency


def build_repository(env: str, region: str) -> RoomRepository:
    os.environ.setdefault("AWS_DEFAULT_REGION", region)
    return RoomRepository(DynamoDBService(environment=env))


def describe_room(room: Room) -> list[str]:
    lines = [
        f"  Room ID: {room.id or NOT_AVAILABLE}",
        f"  Room Number: {room.room_number or NOT_AVAILABLE}",
        f"  Name: {room.name or NOT_AVAILABLE}",
        f"  Type: {room.type.value if room.type else NOT_AVAILABLE}",
        f"  Branch: {room.branch.display_name if room.branch else NOT_AVAILABLE}",
        f"  Price: {display_currency(room.price)}",
        f"  Beds: {room.occupied_beds}/{room.total_beds} occupied",
        f"  Status: {'archived' if room.is_archived else ('available' if room.available else 'occupied')}",
    ]
    warning = room.occupancy_warning()
    if warning:
        lines.append(f"  ⚠️  {warning}")
    return lines


def list_rooms(repository: RoomRepository) -> int:
    rooms = repository.get_all(include_archived=True)
    if not rooms:
        print("No rooms found.")
        return 0

    print(f"Found {len(rooms)} rooms:\n")
    for index, room in enumerate(rooms, start=1):
        print(f"[{index}] Room Details:")
        print("\n".join(describe_room(room)))
        print()
    print(f"Total: {len(rooms)} rooms")
    return len(rooms)


def delete_room(repository: RoomRepository, room_id: str, dry_run: bool = False) -> bool:
    room = repository.get(room_id)
    if room is None:
        print(f"No room found with ID: {room_id}")
        return False
    if dry_run:
        print(f"[DRY RUN] Would delete room {room.id} ({room.name or room.room_number})")
        return True
    deleted = repository.delete(room_id)
    if deleted:
        print(f"Deleted room {room.id} ({room.name or room.room_number})")
    return deleted


def delete_room_by_number(
    repository: RoomRepository, room_number: str, dry_run: bool = False
) -> bool:
    room = repository.find_by_number(room_number)
    if room is None or not room.id:
        print(f"No room found with room number: {room_number}")
        return False
    return delete_room(repository, room.id, dry_run)


def archive_room(repository: RoomRepository, room_id: str, dry_run: bool = False) -> bool:
    if dry_run:
        print(f"[DRY RUN] Would archive room {room_id}")
        return repository.get(room_id) is not None
    archived = repository.archive(room_id)
    print(f"Archived room {room_id}" if archived else f"No room found with ID: {room_id}")
    return archived


def clear_all_rooms(repository: RoomRepository, dry_run: bool = False) -> int:
    """Delete every room, archived ones included. Returns the count."""
    rooms = [room for room in repository.get_all(include_archived=True) if room.id]
    if dry_run:
        print(f"[DRY RUN] Would delete {len(rooms)} rooms")
        return len(rooms)

    deleted = sum(1 for room in rooms if repository.delete(room.id or ""))
    print(f"Deleted {deleted} rooms")
    return deleted


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage rooms in DynamoDB")
    parser.add_argument(
        "--env",
        required=True,
        choices=["dev", "prod"],
        help="Environment whose rooms table to use",
    )
    parser.add_argument(
        "--region",
        default="ap-southeast-1",
        help="AWS region (default: ap-southeast-1)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would change without writing",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Skip confirmation prompt for clear-all",
    )

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("list", help="List all rooms")
    delete = commands.add_parser("delete", help="Delete a room by ID")
    delete.add_argument("room_id")
    by_number = commands.add_parser("delete-by-number", help="Delete a room by room number")
    by_number.add_argument("room_number")
    archive = commands.add_parser("archive", help="Hide a room from listings")
    archive.add_argument("room_id")
    commands.add_parser("clear-all", help="Delete ALL rooms (careful!)")
    return parser


def main(argv: list[str] | None = None, repository: RoomRepository | None = None) -> int:
    args = build_parser().parse_args(argv)
    repository = repository or build_repository(args.env, args.region)

    if args.command == "list":
        list_rooms(repository)
        return 0
    if args.command == "delete":
        return 0 if delete_room(repository, args.room_id, args.dry_run) else 1
    if args.command == "delete-by-number":
        return 0 if delete_room_by_number(repository, args.room_number, args.dry_run) else 1
    if args.command == "archive":
        return 0 if archive_room(repository, args.room_id, args.dry_run) else 1

    # clear-all
    if not args.dry_run and not args.force:
        print("⚠️  WARNING: This will delete ALL rooms!")
        print("    This action is IRREVERSIBLE.")
        response = input("    Type 'DELETE ROOMS' to confirm: ")
        if response != "DELETE ROOMS":
            print("Aborted.")
            return 1
    clear_all_rooms(repository, args.dry_run)
    return 0


if __name__ == "__main__":
    sys.exit(main())
