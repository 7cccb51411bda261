"""Seed data for the in-process mock dataset (teacher id "teacher-1")."""

TEACHER_ID = "teacher-1"


def _student(id, name, category, level, schedule, book, ticket_type, ticket_count=None,
             ticket_period=None, unpaid=False, **extra):
    student = {
        "id": id,
        "teacherId": TEACHER_ID,
        "name": name,
        "category": category,
        "level": level,
        "schedule": schedule,
        "book": book,
        "ticketType": ticket_type,
        "ticketCount": ticket_count if ticket_type == "count" else None,
        "ticketPeriod": ticket_period if ticket_type == "period" else None,
        "unpaid": unpaid,
    }
    student.update(extra)
    return student


STUDENTS = [
    _student("1", "김지우", "초등", "초급", "월/수 16:00", "바이엘 45p", "count", 8,
             phone="010-1111-1111", parentName="김영희", parentPhone="010-9999-1111", parentId="parent-1"),
    _student("2", "박서연", "초등", "중급", "화/목 17:00", "체르니 100-23", "count", 3, unpaid=True),
    _student("3", "이민준", "고등", "고급", "월/금 18:00", "소나타 Op.13", "period",
             ticket_period={"start": "2025-01-01", "end": "2025-03-31"}),
    _student("4", "최예은", "초등", "초급", "수/금 15:00", "바이엘 32p", "count", 5),
    _student("5", "정하윤", "고등", "중급", "화/목 16:00", "체르니 100-45", "count", 2, unpaid=True),
    _student("6", "강도현", "성인", "고급", "월/수 19:00", "쇼팽 왈츠", "period",
             ticket_period={"start": "2024-12-01", "end": "2025-06-30"}),
    _student("7", "윤서아", "초등", "초급", "화/목 15:30", "바이엘 28p", "count", 6),
    _student("8", "임준혁", "고등", "중급", "수/금 17:30", "체르니 100-38", "count", 1, unpaid=True),
    _student("9", "한지민", "초등", "초급", "월/수 14:00", "바이엘 52p", "count", 9),
    _student("10", "송민서", "성인", "중급", "화/금 18:00", "체르니 100-50", "period",
             ticket_period={"start": "2025-01-01", "end": "2025-02-28"}),
]

ATTENDANCE = [
    {"id": "1", "teacherId": TEACHER_ID, "studentId": "1", "studentName": "김지우",
     "date": "2025-01-06", "status": "present", "note": ""},
    {"id": "2", "teacherId": TEACHER_ID, "studentId": "1", "studentName": "김지우",
     "date": "2025-01-08", "status": "late", "note": "10분 지각"},
    {"id": "3", "teacherId": TEACHER_ID, "studentId": "2", "studentName": "박서연",
     "date": "2025-01-07", "status": "absent", "note": "감기"},
    {"id": "4", "teacherId": TEACHER_ID, "studentId": "2", "studentName": "박서연",
     "date": "2025-01-09", "status": "makeup", "note": "보강"},
]

NOTICES = [
    {
        "id": "1", "teacherId": TEACHER_ID, "title": "12월 발표회 안내",
        "content": "12월 25일(수) 오후 2시, 학원 연주홀에서 정기 발표회를 개최합니다.",
        "date": "2025-10-15", "time": "14:30", "confirmed": 28, "total": 30,
        "template": "event", "recipients": ["1", "2"], "readBy": [],
        "createdAt": "2025-10-15T14:30:00",
    },
    {
        "id": "2", "teacherId": TEACHER_ID, "title": "10월 셋째 주 휴강 안내",
        "content": "10월 18일(금)은 휴강합니다. 보강 일정은 개별 안내드리겠습니다.",
        "date": "2025-10-10", "time": "09:15", "confirmed": 30, "total": 30,
        "template": "holiday", "recipients": ["1"], "readBy": [],
        "createdAt": "2025-10-10T09:15:00",
    },
    {
        "id": "3", "teacherId": TEACHER_ID, "title": "수강료 납부 안내",
        "content": "10월 수강료 납부 기한은 10월 5일(목)까지입니다.",
        "date": "2025-10-01", "time": "10:00", "confirmed": 30, "total": 30,
        "template": "payment", "recipients": ["1", "2", "3"], "readBy": [],
        "createdAt": "2025-10-01T10:00:00",
    },
]

PAYMENTS = [
    {
        "id": "1", "teacherId": TEACHER_ID, "studentId": "1", "studentName": "김지우",
        "date": "2025-01-01", "month": "2025-01", "amount": 280000, "type": "8회권",
        "status": "paid", "method": "카드",
        "ticketInfo": {"ticketType": "count", "ticketCount": 8, "ticketPeriod": None},
    },
    {
        "id": "2", "teacherId": TEACHER_ID, "studentId": "1", "studentName": "김지우",
        "date": "2024-12-01", "month": "2024-12", "amount": 280000, "type": "8회권",
        "status": "paid", "method": "현금",
        "ticketInfo": {"ticketType": "count", "ticketCount": 8, "ticketPeriod": None},
    },
    {
        "id": "3", "teacherId": TEACHER_ID, "studentId": "2", "studentName": "박서연",
        "date": "2025-01-05", "month": "2025-01", "amount": 150000, "type": "4회권",
        "status": "unpaid", "method": "계좌이체",
        "ticketInfo": {"ticketType": "count", "ticketCount": 4, "ticketPeriod": None},
    },
]

LESSON_NOTES = [
    {
        "id": "1", "teacherId": TEACHER_ID, "studentId": "1", "date": "2025-01-06",
        "progress": "바이엘 45번", "homework": "45~46번 매일 10분", "memo": "손 모양이 좋아졌어요",
        "strengths": "리듬감", "improvements": "왼손 템포", "isPublic": True,
        "createdAt": "2025-01-06T17:00:00",
    },
    {
        "id": "2", "teacherId": TEACHER_ID, "studentId": "2", "date": "2025-01-07",
        "progress": "체르니 100-23", "homework": "23번 복습", "memo": "결석으로 진도 보류",
        "strengths": "", "improvements": "", "isPublic": False,
        "createdAt": "2025-01-07T18:00:00",
    },
]

PROGRESS = [
    {
        "id": "1", "teacherId": TEACHER_ID, "studentId": "1", "studentName": "김지우",
        "book": {"name": "바이엘", "totalSongs": 106}, "status": "in_progress",
        "songs": [
            {"number": 44, "title": "바이엘 44번", "status": "completed",
             "startDate": "2024-12-20", "completedDate": "2024-12-30"},
            {"number": 45, "title": "바이엘 45번", "status": "completed",
             "startDate": "2024-12-30", "completedDate": "2025-01-06"},
            {"number": 46, "title": "바이엘 46번", "status": "in_progress", "startDate": "2025-01-06"},
        ],
        "stats": {"totalSongs": 106, "completedSongs": 2, "inProgressSongs": 1,
                  "completionRate": 1.9, "averageTimePerSong": 9},
        "createdAt": "2024-12-20T16:00:00", "updatedAt": "2025-01-06T17:00:00",
    },
    {
        "id": "2", "teacherId": TEACHER_ID, "studentId": "2", "studentName": "박서연",
        "book": {"name": "체르니 100", "totalSongs": 100}, "status": "in_progress",
        "songs": [
            {"number": 22, "title": "체르니 100-22", "status": "completed",
             "startDate": "2024-12-16", "completedDate": "2024-12-30"},
            {"number": 23, "title": "체르니 100-23", "status": "in_progress", "startDate": "2024-12-30"},
        ],
        "stats": {"totalSongs": 100, "completedSongs": 1, "inProgressSongs": 1,
                  "completionRate": 1.0, "averageTimePerSong": 14},
        "createdAt": "2024-12-16T18:00:00", "updatedAt": "2024-12-30T18:00:00",
    },
]

ACTIVITIES = [
    {"id": "1", "teacherId": TEACHER_ID, "type": "attendance", "action": "출석 체크",
     "title": "출석 체크", "description": "정상 출석", "studentId": "1", "studentName": "김지우",
     "relatedId": "1", "timestamp": "2025-01-06T16:30:00"},
    {"id": "2", "teacherId": TEACHER_ID, "type": "payment", "action": "수강료 납부",
     "title": "수강료 납부", "description": "8회권 · 280,000원", "studentId": "2", "studentName": "박서연",
     "relatedId": "3", "timestamp": "2025-01-05T11:00:00"},
    {"id": "3", "teacherId": TEACHER_ID, "type": "notice", "action": "알림장 발송",
     "title": "알림장 발송", "description": "5명에게 발송 완료", "studentId": None, "studentName": None,
     "relatedId": "1", "timestamp": "2025-01-04T09:00:00"},
    {"id": "4", "teacherId": TEACHER_ID, "type": "student", "action": "학생 등록",
     "title": "학생 등록", "description": "초급 · 월/수 16:00", "studentId": "9", "studentName": "한지민",
     "relatedId": "9", "timestamp": "2025-01-02T15:00:00"},
]

NOTIFICATIONS = [
    {"id": "1", "teacherId": TEACHER_ID, "type": "payment_due", "title": "수강료 미납",
     "message": "박서연 학생의 수강료가 미납되었습니다", "targetId": "2", "isRead": False,
     "timestamp": "2025-01-05T09:00:00"},
    {"id": "2", "teacherId": TEACHER_ID, "type": "ticket_low", "title": "수강권 소진 임박",
     "message": "임준혁 학생의 잔여 수강권이 1회 남았습니다", "targetId": "8", "isRead": True,
     "timestamp": "2025-01-03T09:00:00"},
]

EXPENSES = [
    {"id": "1", "teacherId": TEACHER_ID, "category": "TEXTBOOK", "amount": 45000,
     "description": "바이엘 교재 구입", "date": "2025-01-03"},
    {"id": "2", "teacherId": TEACHER_ID, "category": "UTILITY", "amount": 120000,
     "description": "1월 전기요금", "date": "2025-01-20"},
]

SCHEDULE_REQUESTS = [
    {"id": "1", "teacherId": TEACHER_ID, "studentId": "1", "studentName": "김지우",
     "parentId": "parent-1", "currentSchedule": "월/수 16:00", "requestedSchedule": "화/목 16:00",
     "reason": "학교 방과후 일정 변경", "status": "pending", "rejectionReason": None,
     "createdAt": "2025-01-04T10:00:00"},
]

# Parent dashboard fixtures (child "1")
CHILD_DATA = {
    "id": "1", "name": "김지우", "level": "초급", "schedule": "월/수 16:00",
    "teacher": "김원장", "teacherId": TEACHER_ID, "book": "바이엘",
    "progress": 48, "progressPage": 48, "totalPages": 100,
    "ticketType": "count", "ticketCount": 3, "ticketUsed": 1, "ticketTotal": 4,
    "attendanceRate": "95%", "totalAttendance": 38, "consecutiveAttendance": 12,
}

PARENT_RECENT_ACTIVITIES = [
    {"id": "1", "type": "notice", "title": "발표회 안내", "content": "12월 25일 발표회가 있습니다", "isNew": True},
    {"id": "2", "type": "attendance", "title": "출석 완료", "content": "오늘 수업 잘 마쳤습니다 👏", "isNew": False},
    {"id": "3", "type": "memo", "title": "수업 메모", "content": "리듬감이 좋아졌어요", "isNew": False},
]

TODAY_SCHEDULE = {
    "hasClass": True, "classTime": "16:00", "classEndTime": "16:50",
    "hoursUntilClass": 2, "homework": "바이엘 48~50쪽 복습",
}

COMPLETED_SONGS = [
    {"id": "1", "name": "바이엘 48번", "date": "2025-10-16", "rating": 5},
    {"id": "2", "name": "바이엘 47번", "date": "2025-10-15", "rating": 5},
    {"id": "3", "name": "바이엘 46번", "date": "2025-10-14", "rating": 4},
]

WEEKLY_TASKS = [
    {"id": "1", "title": "바이엘 48~50쪽 복습", "description": "매일 10분씩", "completed": False},
    {"id": "2", "title": "리듬 연습: 8분음표 패턴", "description": "매일", "completed": True},
    {"id": "3", "title": "스케일 C major 5회", "description": "매일", "completed": False},
]

CHILD_ATTENDANCE = [
    {"date": "2025-10-01", "status": "present"},
    {"date": "2025-10-06", "status": "present"},
    {"date": "2025-10-08", "status": "present"},
    {"date": "2025-10-13", "status": "absent"},
    {"date": "2025-10-15", "status": "present"},
    {"date": "2025-10-17", "status": "makeup"},
    {"date": "2025-09-01", "status": "present"},
    {"date": "2025-09-03", "status": "present"},
    {"date": "2025-09-10", "status": "late"},
    {"date": "2025-09-15", "status": "present"},
]

UPCOMING_CLASSES = [
    {"date": "10월 20일 (월)", "time": "오후 4:00 - 4:50", "isPrimary": True},
    {"date": "10월 22일 (수)", "time": "오후 4:00 - 4:50", "isPrimary": False},
]

PAYMENT_HISTORY = [
    {"id": "1", "ticketType": "count", "type": "4회권", "amount": 150000, "date": "2025-10-01",
     "status": "active", "used": 1, "total": 4, "method": "카드"},
    {"id": "2", "ticketType": "period", "type": "기간정액권 (1개월)", "amount": 320000,
     "originalAmount": 400000, "date": "2025-09-10", "status": "completed",
     "startDate": "2025-09-10", "endDate": "2025-10-09", "daysTotal": 30, "daysUsed": 30, "method": "카드"},
    {"id": "3", "ticketType": "count", "type": "8회권", "amount": 280000, "date": "2025-08-15",
     "status": "completed", "used": 8, "total": 8, "method": "현금"},
]

TICKET_PRICES = [
    {"ticketType": "count", "type": "4회권", "price": 150000, "pricePerClass": 37500,
     "highlighted": True, "description": "주 1회 수업"},
    {"ticketType": "count", "type": "8회권", "price": 280000, "pricePerClass": 35000,
     "highlighted": False, "description": "주 2회 수업"},
    {"ticketType": "period", "type": "기간정액권 (1개월)", "price": 400000, "pricePerClass": None,
     "highlighted": False, "description": "매일 1일~30일", "period": 30},
]

GALLERY_ITEMS = [
    {"id": "1", "studentId": "1", "type": "image", "title": "10월 발표회", "date": "2025-10-15",
     "description": "첫 발표회에서 멋진 연주를 선보였어요!", "category": "event", "likes": 3, "comments": []},
    {"id": "2", "studentId": "1", "type": "video", "title": "바이엘 48번 연습", "date": "2025-10-14",
     "description": "리듬감이 많이 좋아졌어요", "category": "practice", "likes": 0, "comments": []},
    {"id": "3", "studentId": "1", "type": "image", "title": "수업 중", "date": "2025-10-13",
     "description": "열심히 연습하는 모습", "category": "lesson", "likes": 1, "comments": []},
]

TIMELINE = [
    {"id": "1", "type": "achievement", "title": "발표회 참여 🎊",
     "description": "10월 학원 발표회에서 멋진 연주를 선보였어요!", "date": "2025-10-15",
     "hasMedia": True, "mediaCount": 3},
    {"id": "2", "type": "milestone", "title": "첫 완주 달성! 🎉",
     "description": "바이엘 25번을 처음으로 완벽하게 연주했어요", "date": "2025-09-20",
     "hasMedia": False, "mediaCount": 0},
]

ACHIEVEMENTS = [
    {"id": "1", "icon": "🎯", "name": "첫 수업", "active": True},
    {"id": "2", "icon": "🔥", "name": "10회 출석", "active": True},
    {"id": "3", "icon": "📚", "name": "10곡 완주", "active": True},
    {"id": "4", "icon": "🎪", "name": "발표회", "active": True},
    {"id": "5", "icon": "💯", "name": "완벽한 출석", "active": False},
]
