"""
Payments, per-student ticket state and the tuition summary numbers.
"""
from datetime import timedelta

from Pianoacademy.core.formatters import format_won, parse_date
from Pianoacademy.core.payment_utils import get_days_until_expiry, get_ticket_status
from Pianoacademy.stores.base import EffectsMixin, FIVE_MINUTES, Store
from Pianoacademy.stores.notification_store import PAYMENT_RECEIVED

STATS_WINDOW_DAYS = 30
EXPIRING_DAYS = 7


def _empty_stats():
    return {"total": 0, "unpaidCount": 0, "lowTicketCount": 0, "expiringCount": 0}


class PaymentStore(EffectsMixin, Store):
    name = "PaymentStore"
    ttl = FIVE_MINUTES

    def __init__(self, repository, effects=None, notifications=None, activities=None, current_user=None,
                 clock=None):
        self.repository = repository
        self.effects = effects
        self.notifications = notifications
        self.activities = activities
        self.current_user = current_user
        super().__init__(clock)

    def _reset_state(self):
        self.payments = []
        self.student_payments = {}
        self.tickets = {}
        self.stats = _empty_stats()

    def fetch_all_payments(self, force_refresh=False):
        if not force_refresh and self.is_fresh():
            return self.payments

        def work():
            payments = self.repository.get_all()
            self._set(payments=payments, last_fetched=self.now())
            self.calculate_stats()
            return payments
        return self._run_action("결제 내역을 불러오는데 실패했습니다.", work)

    def fetch_student_payments(self, student_id):
        def work():
            payments = self.repository.get_by_student_id(student_id)
            self._set(student_payments={**self.student_payments, student_id: payments})
            return payments
        return self._run_action("결제 내역을 불러오는데 실패했습니다.", work)

    def _replace_everywhere(self, payment_id, payment):
        self._set(
            payments=[payment if p.get("id") == payment_id else p for p in self.payments],
            student_payments={
                sid: [payment if p.get("id") == payment_id else p for p in items]
                for sid, items in self.student_payments.items()
            },
        )

    def add_payment(self, payment_data):
        def work():
            payment = self.repository.create(payment_data)
            student_id = payment_data["studentId"]
            self._set(
                payments=self.payments + [payment],
                student_payments={
                    **self.student_payments,
                    student_id: self.student_payments.get(student_id, []) + [payment],
                },
            )
            if payment_data.get("ticketInfo"):
                self.update_ticket(student_id, payment_data["ticketInfo"])
            self.calculate_stats()
            return payment
        payment = self._run_action("결제 추가에 실패했습니다.", work)

        student_name = payment_data.get("studentName") or "학생"
        amount = format_won(payment_data.get("amount"))
        self._notify_user({
            "type": PAYMENT_RECEIVED,
            "title": "결제 완료",
            "message": f"{student_name}의 {amount} 결제가 완료되었습니다",
            "targetId": payment_data["studentId"],
        })
        self._log_activity({
            "type": "payment",
            "action": "add",
            "title": "수강료 결제",
            "description": f"{student_name} - {amount} ({payment_data.get('type') or '수강료'})",
            "studentId": payment_data["studentId"],
            "studentName": payment_data.get("studentName"),
            "relatedId": payment.get("id"),
        })
        return payment

    def update_payment(self, payment_id, updates):
        def work():
            payment = self.repository.update(payment_id, updates)
            self._replace_everywhere(payment_id, payment)
            self.calculate_stats()
            return payment
        payment = self._run_action("결제 정보 수정에 실패했습니다.", work)
        if updates.get("status") == "paid":
            self._log_activity({
                "type": "payment",
                "action": "update",
                "title": "수강료 납부 처리",
                "description": f"{payment.get('studentName') or '학생'} - {format_won(payment.get('amount'))} 납부 완료",
                "studentId": payment.get("studentId"),
                "studentName": payment.get("studentName"),
                "relatedId": payment_id,
            })
        return payment

    def mark_as_paid(self, payment_id, paid_date=None):
        def work():
            payment = self.repository.mark_as_paid(payment_id, paid_date)
            self._replace_everywhere(payment_id, payment)
            self.calculate_stats()
            return payment
        return self._run_action("결제 정보 수정에 실패했습니다.", work)

    def delete_payment(self, payment_id):
        deleted = next((p for p in self.payments if p.get("id") == payment_id), None)

        def work():
            self.repository.delete(payment_id)
            self._set(
                payments=[p for p in self.payments if p.get("id") != payment_id],
                student_payments={
                    sid: [p for p in items if p.get("id") != payment_id]
                    for sid, items in self.student_payments.items()
                },
            )
            self.calculate_stats()
            return {"success": True}
        result = self._run_action("결제 삭제에 실패했습니다.", work)
        if deleted:
            self._log_activity({
                "type": "payment",
                "action": "delete",
                "title": "수강료 삭제",
                "description": f"{deleted.get('studentName') or '학생'} - {format_won(deleted.get('amount'))} 삭제됨",
                "studentId": deleted.get("studentId"),
                "studentName": deleted.get("studentName"),
                "relatedId": payment_id,
            })
        return result

    # --- tickets ---

    def update_ticket(self, student_id, ticket_info):
        ticket = {
            **ticket_info,
            "status": get_ticket_status(ticket_info, today=self.today()),
            "updatedAt": self.now(),
        }
        self._set(tickets={**self.tickets, student_id: ticket})
        self.calculate_stats()
        return ticket

    def decrement_ticket_count(self, student_id):
        ticket = self.tickets.get(student_id)
        if not ticket or ticket.get("ticketType") != "count" or (ticket.get("ticketCount") or 0) <= 0:
            return ticket
        return self.update_ticket(student_id, {**ticket, "ticketCount": ticket["ticketCount"] - 1})

    def get_ticket(self, student_id):
        return self.tickets.get(student_id)

    # --- stats ---

    def calculate_stats(self):
        today = self.today()
        since = today - timedelta(days=STATS_WINDOW_DAYS)
        total = 0
        for p in self.payments:
            d = parse_date(p.get("date"))
            if d is not None and d >= since:
                total += p.get("amount") or 0

        low_ticket = 0
        expiring = 0
        for t in self.tickets.values():
            if t.get("ticketType") == "count" and 0 < (t.get("ticketCount") or 0) <= 2:
                low_ticket += 1
            end = (t.get("ticketPeriod") or {}).get("end")
            if t.get("ticketType") == "period" and end:
                days_left = get_days_until_expiry(end, today=today)
                if 0 < days_left <= EXPIRING_DAYS:
                    expiring += 1

        stats = {
            "total": total,
            "unpaidCount": sum(1 for p in self.payments if p.get("status") == "unpaid"),
            "lowTicketCount": low_ticket,
            "expiringCount": expiring,
        }
        self._set(stats=stats)
        return stats

    def get_unpaid_payments(self):
        return [p for p in self.payments if p.get("status") == "unpaid"]
