#!/usr/bin/env python3
"""
Shaping RandomUser records for display:
- full names and postal addresses as text
- flatten records into a Pandas table (CLI summary, JSON state)
"""

from typing import List, Sequence

import pandas as pd

from .models import Location, UserRecord

DISPLAY_COLUMNS = ["full_name", "gender", "email", "address", "picture"]


def full_name(user: UserRecord) -> str:
    # "first last", exactly as the card and the modal heading show it
    return f"{user.name.first} {user.name.last}"


def address_lines(location: Location) -> List[str]:
    # street number + street name / city, state / country postcode
    return [
        f"{location.street.number} {location.street.name}",
        f"{location.city}, {location.state}",
        f"{location.country} {location.postcode}",
    ]


def format_address(location: Location, sep: str = "\n") -> str:
    return sep.join(address_lines(location))


def users_frame(users: Sequence[UserRecord]) -> pd.DataFrame:
    """
    Flatten records into one row per user with the display columns.

    Rows keep the order of ``users``. Records without email/location (basic
    and modal pages) get empty strings in those columns.
    """
    df_raw = pd.json_normalize([u.model_dump() for u in users])
    # Turns the list of nested user dicts into a flat DataFrame (columns like name.first, picture.large, etc.)

    if df_raw.empty: # json_normalize of an empty list has no columns at all
        return pd.DataFrame(columns=DISPLAY_COLUMNS)

    # Build the display table column by column. Names and addresses come from the records themselves
    # because they are joined text, the rest are plain flattened columns.
    df_display = pd.DataFrame(
        {
            "full_name": [full_name(u) for u in users],
            "gender": df_raw["gender"],
            "email": df_raw["email"] if "email" in df_raw else "", # basic/modal records have no email column
            "address": [
                format_address(u.location, sep=", ") if getattr(u, "location", None) else ""
                for u in users
            ],
            "picture": df_raw["picture.large"],
        }
    )
    return df_display[DISPLAY_COLUMNS] # fixed column order for printing and JSON
