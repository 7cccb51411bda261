from datetime import date

from Pianoacademy.core.formatters import month_key, parse_date, round_half_up, shift_month

PROGRESS_STATUS_LABELS = {
    "not_started": "시작 전",
    "in_progress": "진행 중",
    "completed": "완료",
}


def _one_decimal(value) -> float:
    return round_half_up(value * 10) / 10


def calculate_song_stats(songs, total_songs):
    """Per-book stats from its song list.

    completionRate is completed / total_songs in percent (one decimal);
    averageTimePerSong is the mean number of days from startDate to
    completedDate over completed songs that carry both dates.
    """
    songs = songs or []
    completed = [s for s in songs if s.get("status") == "completed"]
    in_progress = sum(1 for s in songs if s.get("status") == "in_progress")
    rate = len(completed) / total_songs * 100 if total_songs and total_songs > 0 else 0

    days = []
    for song in completed:
        start, end = parse_date(song.get("startDate")), parse_date(song.get("completedDate"))
        if start and end:
            days.append((end - start).days)

    return {
        "totalSongs": total_songs or 0,
        "completedSongs": len(completed),
        "inProgressSongs": in_progress,
        "completionRate": _one_decimal(rate),
        "averageTimePerSong": round_half_up(sum(days) / len(days)) if days else 0,
    }


def empty_stats(total_songs=0):
    return calculate_song_stats([], total_songs)


def calculate_progress_stats(progress_list):
    """Totals across a student's books."""
    if not progress_list:
        return {
            "totalBooks": 0,
            "completedBooks": 0,
            "inProgressBooks": 0,
            "totalSongs": 0,
            "completedSongs": 0,
            "averageCompletionRate": 0,
        }
    stats = [p.get("stats") or {} for p in progress_list]
    return {
        "totalBooks": len(progress_list),
        "completedBooks": sum(1 for p in progress_list if p.get("status") == "completed"),
        "inProgressBooks": sum(1 for p in progress_list if p.get("status") == "in_progress"),
        "totalSongs": sum(s.get("totalSongs") or 0 for s in stats),
        "completedSongs": sum(s.get("completedSongs") or 0 for s in stats),
        "averageCompletionRate": _one_decimal(
            sum(s.get("completionRate") or 0 for s in stats) / len(progress_list)),
    }


def get_monthly_progress_data(progress_list, months=6, today=None):
    """Completed songs per month over the last ``months`` months, oldest first.

    Returns ``{"labels": ["8월", ...], "data": [counts]}``; both empty when
    there is no progress at all.
    """
    if not progress_list:
        return {"labels": [], "data": []}
    today = today or date.today()
    keys = []
    for offset in range(months - 1, -1, -1):
        year, month = shift_month(today.year, today.month, -offset)
        keys.append((f"{year:04d}-{month:02d}", f"{month}월"))
    counts = dict.fromkeys((key for key, _ in keys), 0)

    for progress in progress_list:
        for song in progress.get("songs") or []:
            if song.get("status") != "completed" or not song.get("completedDate"):
                continue
            key = month_key(song["completedDate"])
            if key in counts:
                counts[key] += 1

    return {
        "labels": [label for _, label in keys],
        "data": [counts[key] for key, _ in keys],
    }
