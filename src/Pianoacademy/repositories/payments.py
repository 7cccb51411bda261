from datetime import date

from Pianoacademy.core.formatters import format_date, month_key, parse_date, shift_month
from Pianoacademy.core.validators import ensure_valid, validate_amount
from Pianoacademy.repositories.base import (
    ApiCrudRepository,
    FirebaseCrudRepository,
    MockCrudRepository,
    in_date_range,
    sort_desc,
)

# month offsets for the aggregate fetch: next month back to eleven months ago
SHARD_OFFSETS = range(-1, 12)


def month_shards(today):
    """``YYYY-MM`` keys from next month (i = -1) to eleven months back (i = 11)."""
    keys = []
    for i in SHARD_OFFSETS:
        year, month = shift_month(today.year, today.month, -i)
        keys.append(f"{year:04d}-{month:02d}")
    return keys


def months_between(start, end):
    start, end = parse_date(start), parse_date(end)
    keys = []
    year, month = start.year, start.month
    while (year, month) <= (end.year, end.month):
        keys.append(f"{year:04d}-{month:02d}")
        year, month = shift_month(year, month, 1)
    return keys


class PaymentRules:
    name = "PaymentRepository"
    collection_name = "payments"
    group = "payments"
    not_found_message = "결제 내역을 찾을 수 없습니다"
    required_fields = ("studentId", "amount")

    def validate_new(self, data):
        super().validate_new(data)
        ensure_valid(validate_amount(data.get("amount")))

    def _new_payment(self, data):
        payment = {"status": "paid", **data}
        payment.setdefault("date", date.today().isoformat())
        payment["date"] = format_date(payment["date"])
        payment.setdefault("month", month_key(payment["date"]))
        return payment

    def get_unpaid(self):
        self._log("get_unpaid")
        return [p for p in self.get_all() if p.get("status") == "unpaid"]

    def mark_as_paid(self, payment_id, paid_date=None):
        self._log("mark_as_paid", payment_id, paid_date)
        paid = format_date(paid_date or date.today())
        return self.update(payment_id, {"status": "paid", "isPaid": True, "paidDate": paid})


class MockPaymentRepository(PaymentRules, MockCrudRepository):
    insert_front = True

    def create(self, data):
        self.validate_new(data)
        return super().create(self._new_payment(data))

    def get_by_student_id(self, student_id):
        self._log("get_by_student_id", student_id)
        self._delay()
        return self._list(lambda p: p.get("studentId") == student_id)

    def get_by_date_range(self, start, end):
        self._log("get_by_date_range", start, end)
        self._delay()
        return self._list(lambda p: in_date_range(p.get("date"), start, end))


class ApiPaymentRepository(PaymentRules, ApiCrudRepository):

    def create(self, data):
        self.validate_new(data)
        return super().create(self._new_payment(data))

    def get_by_student_id(self, student_id):
        self._log("get_by_student_id", student_id)
        return self._call("get_by_student_id", self.client.get, self._path("by_student", student_id=student_id))

    def get_unpaid(self):
        self._log("get_unpaid")
        return self._call("get_unpaid", self.client.get, self._path("list"), params={"status": "unpaid"})

    def get_by_date_range(self, start, end):
        self._log("get_by_date_range", start, end)
        params = {"startDate": format_date(start), "endDate": format_date(end)}
        return self._call("get_by_date_range", self.client.get, self._path("list"), params=params)


class FirebasePaymentRepository(PaymentRules, FirebaseCrudRepository):
    """Tuition records live in the ``tuition`` collection, sharded by ``month``."""

    def __init__(self, config, remote, current_user=None, today=None):
        super().__init__(config, remote, current_user)
        self.today = today or date.today

    def _fetch_months(self, method, teacher_id, keys):
        records = []
        for key in keys:
            records.extend(self._data(method, self.remote.get_tuition_records(teacher_id, key)) or [])
        return records

    def get_all(self, **filters):
        """Aggregate of 13 month shards, concatenated as returned."""
        self._log("get_all", filters)
        records = self._fetch_months("get_all", self._teacher_id(), month_shards(self.today()))
        if filters:
            records = [r for r in records if all(r.get(k) == v for k, v in filters.items() if v is not None)]
        return records

    def _remote_get(self, item_id):
        return self.remote.get_tuition_by_id(item_id)

    def _remote_add(self, data, teacher_id):
        return self.remote.save_tuition_record(data, teacher_id)

    def _remote_update(self, item_id, partial):
        if "date" in partial and "month" not in partial:
            partial = {**partial, "month": month_key(partial["date"])}
        return self.remote.update_tuition_record(item_id, partial)

    def _remote_delete(self, item_id):
        return self.remote.delete_tuition_record(item_id)

    def _prepare_new(self, data):
        return self._new_payment(data)

    def get_by_student_id(self, student_id):
        self._log("get_by_student_id", student_id)
        return self._data("get_by_student_id", self.remote.get_tuition_by_student_id(student_id))

    def get_by_date_range(self, start, end):
        self._log("get_by_date_range", start, end)
        records = self._fetch_months("get_by_date_range", self._teacher_id(), months_between(start, end))
        return sort_desc([r for r in records if in_date_range(r.get("date"), start, end)], "date")

    def mark_as_paid(self, payment_id, paid_date=None):
        self._log("mark_as_paid", payment_id, paid_date)
        paid = format_date(paid_date or self.today())
        self._unwrap("mark_as_paid", self.remote.update_tuition_status(payment_id, True, paid))
        return self.get_by_id(payment_id)
