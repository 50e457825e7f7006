# app/services/statistics_service.py
from collections import defaultdict
from decimal import Decimal
from typing import Any, List

from sqlalchemy.orm import Session

from app.domain.enums import OrderStatus, Role, StatisticKind
from app.domain.errors import NoOrdersStoredError, NoUsersStoredError
from app.domain.schemas import (
    BookStat,
    CustomerStat,
    DailyValue,
    OrderStatusCounts,
    StatisticsOut,
)
from app.repos.book_repo import BookRepo
from app.repos.order_repo import OrderRepo
from app.repos.user_repo import UserRepo
from app.utils.settings import STATISTICS_TOP_N


class StatisticsService:
    """
    Tylko odczyt, tylko zamowienia z active = true.
    Pusta tabela -> NoOrdersStoredError / NoUsersStoredError (stan pusty, nie awaria).
    """

    def __init__(self, db: Session, top_n: int = STATISTICS_TOP_N):
        self.orders = OrderRepo(db)
        self.users = UserRepo(db)
        self.books = BookRepo(db)
        self.top_n = top_n

    def get_statistics(self, kind: StatisticKind | str) -> StatisticsOut:
        kind = StatisticKind(kind)
        handlers = {
            StatisticKind.TOP_CUSTOMERS: self.top_customers,
            StatisticKind.TOP_BOOKS: self.top_books,
            StatisticKind.TOTAL_CUSTOMERS: self.total_customers,
            StatisticKind.TOTAL_ORDERS: self.total_orders,
            StatisticKind.TOTAL_REVENUE: self.total_revenue,
            StatisticKind.SALES_OVER_TIME: self.sales_over_time,
            StatisticKind.ORDERS_OVER_TIME: self.orders_over_time,
            StatisticKind.ORDERS_STATUS: self.orders_status,
        }
        result: Any = handlers[kind]()
        return StatisticsOut(kind=kind, result=result)

    def top_customers(self) -> List[CustomerStat]:
        spent: dict[int, Decimal] = defaultdict(lambda: Decimal("0.00"))
        for order in self._delivered():
            spent[order.user_id] += order.total_amount

        # sorted jest stabilne: remisy w kolejnosci pierwszego wystapienia
        ranked = sorted(spent.items(), key=lambda kv: kv[1], reverse=True)[: self.top_n]
        users = self.users.get_users([uid for uid, _ in ranked])

        return [
            CustomerStat(
                user_id=uid,
                name=users[uid].name if uid in users else None,
                total_spent=total,
            )
            for uid, total in ranked
        ]

    def top_books(self) -> List[BookStat]:
        self._require_orders()

        sold: dict[int, int] = defaultdict(int)
        for item in self.orders.delivered_items(OrderStatus.DELIVERED.value):
            sold[item.book_id] += item.quantity

        ranked = sorted(sold.items(), key=lambda kv: kv[1], reverse=True)[: self.top_n]

        result = []
        for book_id, total in ranked:
            book = self.books.get_book(book_id)
            result.append(
                BookStat(book_id=book_id, title=book.title if book else None, total_sold=total)
            )
        return result

    def total_customers(self) -> int:
        if self.users.count_users() == 0:
            raise NoUsersStoredError()
        return len(self.users.list_by_role(Role.CUSTOMER.value))

    def total_orders(self) -> int:
        return self.orders.count_orders()

    def total_revenue(self) -> Decimal:
        return sum((o.total_amount for o in self._delivered()), Decimal("0.00"))

    def sales_over_time(self) -> List[DailyValue]:
        per_day: dict = defaultdict(lambda: Decimal("0.00"))
        for order in self._delivered():
            per_day[order.created_at.date()] += order.total_amount

        return [DailyValue(date=d, value=v) for d, v in sorted(per_day.items())]

    def orders_over_time(self) -> List[DailyValue]:
        self._require_orders()

        per_day: dict = defaultdict(int)
        for order in self.orders.list_active_orders():
            per_day[order.created_at.date()] += 1

        return [DailyValue(date=d, value=Decimal(v)) for d, v in sorted(per_day.items())]

    def orders_status(self) -> OrderStatusCounts:
        self._require_orders()

        counts = {status.value.lower(): 0 for status in OrderStatus}
        for order in self.orders.list_active_orders():
            counts[order.status.lower()] += 1
        return OrderStatusCounts(**counts)

    # helpers

    def _require_orders(self) -> None:
        if self.orders.count_orders() == 0:
            raise NoOrdersStoredError()

    def _delivered(self):
        self._require_orders()
        return [
            o for o in self.orders.list_active_orders()
            if o.status == OrderStatus.DELIVERED.value
        ]
