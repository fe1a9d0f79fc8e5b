import unittest
from dataclasses import replace
from outbound.funnel.inputs import BusinessInputs, CONVERSION_RATE_FIELDS
from outbound.funnel.engine import FunnelError, derive_funnel, funnel_stages

class TestDeriveFunnel(unittest.TestCase):
    def test_default_scenario(self):
        r = derive_funnel(BusinessInputs())
        self.assertEqual(r.revenue_gap, 70000)
        self.assertEqual(r.total_clients_needed, 24)
        self.assertEqual(r.clients_to_close_gap, 8)
        self.assertEqual(r.current_clients, 10)
        self.assertEqual(r.churned_per_month, 1)
        self.assertEqual(r.clients_per_month, 9)
        self.assertEqual(r.calls_shown_needed, 45)
        self.assertEqual(r.meetings_booked_needed, 57)
        self.assertEqual(r.interested_needed, 143)
        self.assertEqual(r.total_replies, 715)
        self.assertEqual(r.emails_per_month, 28600)
        self.assertEqual(r.emails_per_day, 1430)
        self.assertEqual(r.total_emails_over_period, 28600 * 3)

    def test_zero_gap_leaves_only_churn(self):
        r = derive_funnel(BusinessInputs(revenue_target=30000, current_revenue=30000))
        self.assertEqual(r.revenue_gap, 0)
        self.assertEqual(r.total_clients_needed, 0)
        self.assertEqual(r.clients_to_close_gap, 0)
        self.assertEqual(r.clients_per_month, r.churned_per_month)
        self.assertEqual(r.clients_per_month, 1)

    def test_gap_never_negative(self):
        r = derive_funnel(BusinessInputs(revenue_target=10000, current_revenue=50000))
        self.assertEqual(r.revenue_gap, 0)
        self.assertEqual(r.total_clients_needed, 0)

    def test_zero_deal_size_uses_divisor_of_one(self):
        r = derive_funnel(BusinessInputs(avg_deal_size=0, revenue_target=10, current_revenue=4))
        self.assertEqual(r.total_clients_needed, 6)
        self.assertEqual(r.current_clients, 4)

    def test_current_clients_rounds_half_up(self):
        r = derive_funnel(BusinessInputs(current_revenue=7500, avg_deal_size=3000))
        self.assertEqual(r.current_clients, 3)  # 2.5 -> 3
        r = derive_funnel(BusinessInputs(current_revenue=7400, avg_deal_size=3000))
        self.assertEqual(r.current_clients, 2)

    def test_zero_conversion_rate_raises(self):
        for name in CONVERSION_RATE_FIELDS:
            with self.subTest(field=name):
                with self.assertRaises(FunnelError) as ctx:
                    derive_funnel(replace(BusinessInputs(), **{name: 0}))
                self.assertIn(name, str(ctx.exception))
                self.assertIsInstance(ctx.exception, ValueError)

    def test_unbounded_stage_raises(self):
        with self.assertRaises(FunnelError) as ctx:
            derive_funnel(BusinessInputs(reply_rate=1e-320))
        self.assertIn("reply_rate", str(ctx.exception))
        with self.assertRaises(FunnelError):
            derive_funnel(BusinessInputs(revenue_target=1e308, current_revenue=0, avg_deal_size=1e-10))

    def test_does_not_mutate_input(self):
        i = BusinessInputs()
        before = i.key()
        derive_funnel(i)
        self.assertEqual(i.key(), before)

    def test_referentially_transparent(self):
        self.assertEqual(derive_funnel(BusinessInputs()), derive_funnel(BusinessInputs()))

    def test_fields_are_non_negative_integers(self):
        cases = [
            BusinessInputs(),
            BusinessInputs(revenue_target=0, current_revenue=0),
            BusinessInputs(revenue_target=1234567, current_revenue=891, avg_deal_size=777, churn_rate=0),
            BusinessInputs(reply_rate=15, positive_reply_rate=60, close_rate=80, timeframe_months=12),
        ]
        for i in cases:
            d = derive_funnel(i).to_dict()
            for k, v in d.items():
                if k == "revenue_gap":
                    self.assertGreaterEqual(v, 0)
                    continue
                self.assertIsInstance(v, int, k)
                self.assertGreaterEqual(v, 0, k)

    def test_monotonic_in_revenue_target(self):
        last = -1
        for target in range(30000, 300001, 7500):
            epd = derive_funnel(BusinessInputs(revenue_target=target)).emails_per_day
            self.assertGreaterEqual(epd, last)
            last = epd

    def test_monotonic_in_conversion_rates(self):
        for name in CONVERSION_RATE_FIELDS:
            last = None
            for pct in (0.5, 1, 2.5, 5, 10, 20, 35, 50, 75, 100):
                epd = derive_funnel(replace(BusinessInputs(), **{name: pct})).emails_per_day
                if last is not None:
                    self.assertLessEqual(epd, last, f"{name} at {pct}%")
                last = epd


class TestFunnelStages(unittest.TestCase):
    def test_stage_order_and_share(self):
        stages = funnel_stages(derive_funnel(BusinessInputs()))
        self.assertEqual([s["label"] for s in stages], [
            "Emails Sent", "Total Replies", "Interested", "Meetings Booked", "Meetings Shown", "Clients Won",
        ])
        self.assertAlmostEqual(stages[0]["pct"], 100.0)
        self.assertEqual(stages[-1]["value"], 9)
        pcts = [s["pct"] for s in stages]
        self.assertEqual(pcts, sorted(pcts, reverse=True))

    def test_zero_volume_has_zero_share(self):
        r = derive_funnel(BusinessInputs(revenue_target=0, current_revenue=0))
        self.assertEqual(r.emails_per_month, 0)
        self.assertTrue(all(s["pct"] == 0.0 for s in funnel_stages(r)))

if __name__ == '__main__':
    unittest.main()
