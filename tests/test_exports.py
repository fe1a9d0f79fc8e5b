import unittest
from outbound.exports.writers import write_funnel, write_results, SCHEMAS
from outbound.exports.reports import fmt, fmt_currency, summary_md, results_row
from outbound.funnel.engine import derive_funnel, funnel_stages
from outbound.funnel.inputs import BusinessInputs
from outbound.infrastructure.estimator import estimate_infrastructure
from outbound.session import CalculatorSession
import csv
import io

class TestExports(unittest.TestCase):
    def test_funnel_csv(self):
        txt = write_funnel(funnel_stages(derive_funnel(BusinessInputs())))
        recs = list(csv.DictReader(io.StringIO(txt)))
        self.assertEqual(len(recs), 6)
        self.assertEqual(recs[0]["label"], "Emails Sent")
        self.assertEqual(recs[0]["value"], "28600")

    def test_results_csv(self):
        txt = write_results([results_row(CalculatorSession().to_dict())])
        reader = csv.DictReader(io.StringIO(txt))
        recs = list(reader)
        self.assertEqual(reader.fieldnames, SCHEMAS["results"])
        self.assertEqual(recs[0]["emails_per_day"], "1430")
        self.assertEqual(recs[0]["domains_needed"], "16")
        self.assertEqual(recs[0]["provider"], "Google")

    def test_formatting(self):
        self.assertEqual(fmt(28600), "28,600")
        self.assertEqual(fmt(2.5), "3")
        self.assertEqual(fmt_currency(135670.4, "CAD"), "CA$135,670")
        self.assertEqual(fmt_currency(168, "USD"), "$168")

    def test_summary(self):
        i = BusinessInputs()
        f = derive_funnel(i)
        infra = estimate_infrastructure(f.emails_per_day, "Google")
        md = summary_md(i, f, infra, "USD")
        self.assertIn("# Outbound Plan", md)
        self.assertIn("You currently generate $30,000/month.", md)
        self.assertIn("within 3 months", md)
        self.assertIn("9 new clients/month", md)
        self.assertIn("8 to close the gap and 1 to replace 10% monthly churn", md)
        self.assertIn("send 1,430 emails/day", md)
        self.assertIn("- domains: 16", md)
        self.assertIn("- domain cost / year: $176", md)

    def test_summary_single_month(self):
        i = BusinessInputs(timeframe_months=1)
        f = derive_funnel(i)
        md = summary_md(i, f, estimate_infrastructure(f.emails_per_day, "SMTP"), "USD")
        self.assertIn("within 1 month,", md)

if __name__ == '__main__':
    unittest.main()
