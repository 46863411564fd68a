"""Internal constants shared across the package."""

# Join codes are lowercase base36, like the codes shared by the web client.
JOIN_CODE_ALPHABET = "abcdefghijklmnopqrstuvwxyz0123456789"

DEMO_JOIN_CODE = "demo1234"
DEMO_TRIP_NAME = "ทริปเขาใหญ่ วันเดียว"
# Khao Yai area (approximate)
DEMO_CENTER = {"lat": 14.705, "lng": 101.417, "zoom": 10}
DEMO_SCHEDULE: tuple[dict[str, str], ...] = (
    {
        "title": "แวะหาร้านข้าวเช้าระหว่างทาง",
        "time_start": "2025-11-01T09:30:00.000Z",
        "notes": "🚌 เสาร์ 1 พ.ย. 2568 (ไปทางสระบุรี)",
    },
    {
        "title": "ถึง ไร่องุ่น PB Valley 🍇 + ร่วมทัวร์ชม + อาหารไทย/ยุโรป",
        "time_start": "2025-11-01T10:40:00.000Z",
        "notes": "บรรยากาศกลางไร่องุ่น",
        "gmaps_url": "https://maps.app.goo.gl/d73mcde5uVFwGU3U7",
    },
    {
        "title": "ทานอาหารกลางวัน",
        "time_start": "2025-11-01T12:30:00.000Z",
    },
    {
        "title": "Primo Piazza + ฟาร์มแกะ สไตล์อิตาลี",
        "time_start": "2025-11-01T13:30:00.000Z",
        "notes": "คาเฟ่ + จุดถ่ายรูป",
        "gmaps_url": "https://maps.app.goo.gl/KjZFhHH7QngMrjKs7",
    },
    {
        "title": "เช็คอิน The One Hundred Pool Villa Khaoyai 🏡",
        "time_start": "2025-11-01T14:00:00.000Z",
    },
)

TRIP_ROOM_PREFIX = "trip:"
CHAT_ROOM_PREFIX = "chat:"


def trip_room(trip_id: str) -> str:
    """Room carrying vehicle and schedule broadcasts for a trip."""
    return f"{TRIP_ROOM_PREFIX}{trip_id}"


def chat_room(trip_id: str) -> str:
    """Room carrying chat broadcasts for a trip."""
    return f"{CHAT_ROOM_PREFIX}{trip_id}"
