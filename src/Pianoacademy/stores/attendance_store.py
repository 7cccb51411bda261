from Pianoacademy.core import attendance_utils
from Pianoacademy.core.formatters import format_date
from Pianoacademy.stores.base import EffectsMixin, THREE_MINUTES, Store
from Pianoacademy.stores.notification_store import ATTENDANCE_ABSENT

EMPTY_STATS = {"rate": 0, "total": 0, "present": 0, "absent": 0, "late": 0, "makeup": 0}


class AttendanceStore(EffectsMixin, Store):
    name = "AttendanceStore"
    ttl = THREE_MINUTES

    def __init__(self, repository, effects=None, notifications=None, current_user=None, clock=None):
        self.repository = repository
        self.effects = effects
        self.notifications = notifications
        self.current_user = current_user
        super().__init__(clock)

    def _reset_state(self):
        self.records = []
        self.student_records = {}
        self.date_records = {}
        self.stats = {}

    def fetch_all_records(self, force_refresh=False):
        if not force_refresh and self.is_fresh():
            return self.records

        def work():
            records = self.repository.get_all()
            self._set(records=records, last_fetched=self.now())
            return records
        return self._run_action("출석 기록을 불러오는데 실패했습니다.", work)

    def fetch_student_records(self, student_id):
        def work():
            records = self.repository.get_by_student_id(student_id)
            self._set(student_records={**self.student_records, student_id: records})
            self.calculate_stats(student_id, records)
            return records
        return self._run_action("출석 기록을 불러오는데 실패했습니다.", work)

    def fetch_records_by_date(self, day):
        def work():
            records = self.repository.get_by_date(day)
            self._set(date_records={**self.date_records, format_date(day): records})
            return records
        return self._run_action("출석 기록을 불러오는데 실패했습니다.", work)

    def add_record(self, record_data):
        def work():
            record = self.repository.create(record_data)
            student_id = record_data["studentId"]
            student_records = self.student_records.get(student_id, []) + [record]
            self._set(
                records=self.records + [record],
                student_records={**self.student_records, student_id: student_records},
            )
            self.calculate_stats(student_id, student_records)
            return record
        record = self._run_action("출석 기록 추가에 실패했습니다.", work)
        if record_data.get("status") == "absent":
            self._notify_user({
                "type": ATTENDANCE_ABSENT,
                "title": "결석 기록",
                "message": f"{record_data.get('studentName') or '학생'}이(가) {record_data.get('date')}에 결석했습니다",
                "targetId": record_data["studentId"],
            })
        return record

    def update_record(self, record_id, updates):
        def work():
            record = self.repository.update(record_id, updates)
            self._set(records=[record if r.get("id") == record_id else r for r in self.records])
            student_id = record.get("studentId")
            if student_id in self.student_records:
                records = [record if r.get("id") == record_id else r for r in self.student_records[student_id]]
                self._set(student_records={**self.student_records, student_id: records})
                self.calculate_stats(student_id, records)
            return record
        return self._run_action("출석 기록 수정에 실패했습니다.", work)

    def delete_record(self, record_id):
        def work():
            self.repository.delete(record_id)
            record = next((r for r in self.records if r.get("id") == record_id), None)
            self._set(records=[r for r in self.records if r.get("id") != record_id])
            student_id = record.get("studentId") if record else None
            if student_id in self.student_records:
                records = [r for r in self.student_records[student_id] if r.get("id") != record_id]
                self._set(student_records={**self.student_records, student_id: records})
                self.calculate_stats(student_id, records)
        self._run_action("출석 기록 삭제에 실패했습니다.", work)

    def calculate_stats(self, student_id, records=None):
        if records is None:
            records = self.student_records.get(student_id, [])
        stats = {
            "rate": attendance_utils.calculate_attendance_rate(records),
            "total": len(records),
        }
        for status in attendance_utils.STATUS_LABELS:
            stats[status] = sum(1 for r in records if r.get("status") == status)
        self._set(stats={**self.stats, student_id: stats})
        return stats

    def get_monthly_stats(self, student_id, year, month):
        return attendance_utils.get_monthly_stats(self.student_records.get(student_id, []), year, month)

    def get_stats(self, student_id):
        return self.stats.get(student_id) or dict(EMPTY_STATS)
