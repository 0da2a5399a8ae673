REDIS_ROOM_OWNER_KEY = "room:owner:{slug}" # room code - id of the relay instance hosting it

# **Example**
# - `room:owner:standup-42` = `3f9c1a0b7d2e` with TTL ROOM_ANNOUNCE_TTL
# - refreshed on every successful join into the room
# - deleted on host departure only while it still names this instance
