"""Unit Tests - Report engine."""

from datetime import date

import pytest

from agenda.core.reports import (
    ReportRange,
    compute_report,
    minutes_between,
    report_window,
)


class TestMinutesBetween:
    """Tests for minutes_between."""

    @pytest.mark.parametrize(
        ("start", "end", "expected"),
        [
            ("09:00", "10:30", 90),
            ("09:00:00", "10:30:59", 90),
            ("10:00", "09:00", 0),
            ("10:00", "10:00", 0),
            (None, "10:00", 0),
            ("09:00", None, 0),
            ("", "10:00", 0),
            ("nine", "10:00", 0),
            ("9:15", "10:00", 45),
            ("9:00:00", "10:30:00", 90),
            ("25:00", "26:00", 0),
        ],
    )
    def test_minutes_between(self, start, end, expected) -> None:
        assert minutes_between(start, end) == expected


class TestComputeReport:
    """Tests for compute_report."""

    def test_single_day_scenario(self, make_appointment) -> None:
        """Done appointment counts, cancelled one does not."""
        appts = [
            make_appointment(
                date="2024-03-04",
                start_time="09:00",
                end_time="10:00",
                status="done",
                amount=1000,
            ),
            make_appointment(
                date="2024-03-04",
                start_time=None,
                end_time=None,
                status="cancelled",
            ),
        ]

        report = compute_report(appts)

        assert report.total_appointments == 1
        assert report.total_minutes_worked == 60
        assert report.total_hours_worked == 1
        assert report.total_revenue == 1000

    def test_confirmed_counts_as_worked(self, make_appointment) -> None:
        """Confirmed appointments are committed work and count in reports."""
        appts = [
            make_appointment(status="confirmed", amount=300),
            make_appointment(status="pending", amount=999),
        ]

        report = compute_report(appts)

        assert report.total_appointments == 1
        assert report.total_revenue == 300

    def test_hours_are_fractional(self, make_appointment) -> None:
        appts = [
            make_appointment(status="done", start_time="09:00", end_time="09:45"),
            make_appointment(status="done", start_time="10:00", end_time="10:20"),
        ]

        report = compute_report(appts)

        assert report.total_minutes_worked == 65
        assert report.total_hours_worked == pytest.approx(65 / 60)

    def test_missing_and_bad_amounts_count_as_zero(self, make_appointment) -> None:
        appts = [
            make_appointment(status="done", amount=None),
            make_appointment(status="done", amount="abc"),
            make_appointment(status="done", amount="250.5"),
        ]

        report = compute_report(appts)

        assert report.total_revenue == pytest.approx(250.5)

    def test_service_breakdown_ranked(self, make_appointment) -> None:
        appts = [
            make_appointment(service_name="Cut"),
            make_appointment(service_name="Cut"),
            make_appointment(service_name="Color"),
        ]

        report = compute_report(appts)

        assert [s.model_dump() for s in report.service_breakdown] == [
            {"name": "Cut", "count": 2},
            {"name": "Color", "count": 1},
        ]

    def test_breakdown_ties_keep_first_seen_order(self, make_appointment) -> None:
        appts = [
            make_appointment(service_name="Nails"),
            make_appointment(service_name="Color"),
            make_appointment(service_name=None),
            make_appointment(service_name="Color"),
            make_appointment(service_name="Nails"),
            make_appointment(service_name=""),
        ]

        report = compute_report(appts)

        assert [(s.name, s.count) for s in report.service_breakdown] == [
            ("Nails", 2),
            ("Color", 2),
            ("unspecified", 2),
        ]

    def test_custom_statuses_and_label(self, make_appointment) -> None:
        appts = [
            make_appointment(status="done", service_name=None),
            make_appointment(status="confirmed"),
        ]

        report = compute_report(appts, statuses_counted={"done"}, default_label="Sin servicio")

        assert report.total_appointments == 1
        assert report.service_breakdown[0].name == "Sin servicio"

    def test_empty_input(self) -> None:
        report = compute_report([])

        assert report.total_appointments == 0
        assert report.total_hours_worked == 0
        assert report.service_breakdown == []


class TestReportWindow:
    """Tests for report range selection."""

    def test_last_7_days_includes_today(self) -> None:
        window = report_window(ReportRange.LAST_7_DAYS, date(2024, 3, 10))

        assert window.start == date(2024, 3, 4)
        assert window.end == date(2024, 3, 10)
        assert len(window.days()) == 7

    def test_last_30_days(self) -> None:
        window = report_window(ReportRange.LAST_30_DAYS, date(2024, 3, 10))

        assert window.start == date(2024, 2, 10)
        assert len(window.days()) == 30

    def test_all_is_unbounded(self) -> None:
        assert report_window(ReportRange.ALL, date(2024, 3, 10)) is None
