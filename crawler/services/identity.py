from shared.models.player import PlayerIdentity, RosterEntry

# SteamID64 of account id 0
STEAM_ID64_OFFSET = 76561197960265728


def resolve_account_id(raw_id: str) -> str:
    """
    Converts a SteamID64 to the provider's account id.
    Inputs shorter than 17 digits, or numerically below the offset, are
    already account ids and are returned unchanged.

    Non-numeric input is returned as-is: the upstream fetch for it fails and
    the roster entry is counted as failed there.
    """
    value = raw_id.strip()
    if not (value.isascii() and value.isdigit()):
        return value
    if len(value) < 17 or int(value) < STEAM_ID64_OFFSET:
        return value
    return str(int(value) - STEAM_ID64_OFFSET)


def to_identity(entry: RosterEntry) -> PlayerIdentity:
    account_id = resolve_account_id(entry.player_id)
    raw = entry.player_id.strip()
    return PlayerIdentity(
        display_name=entry.display_name,
        steam_id64=raw if account_id != raw else None,
        account_id=account_id,
    )
