import random

# Upper-case letters and digits without the look-alikes I, O, 0 and 1
ROOM_CODE_ALPHABET = 'ABCDEFGHJKLMNPQRSTUVWXYZ23456789'
ROOM_CODE_LENGTH = 6


def generate_room_code(length=ROOM_CODE_LENGTH):
    """Generate a random, short room code. Uniqueness is the caller's job."""
    return ''.join(random.choices(ROOM_CODE_ALPHABET, k=length))


def normalize_code(code) -> str:
    if not code:
        return ''
    return str(code).strip().upper()
