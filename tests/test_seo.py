import unittest
from datetime import datetime, timezone

from jobhub.careerjet.client import normalize_job
from jobhub.seo import (
    format_posted_date,
    job_page_metadata,
    job_posting_structured_data,
    parse_job_date,
    plain_text_from_html,
    render_sitemap,
    robots_txt,
    sitemap_entries,
)
from tests.fakes import make_settings, raw_job

NOW = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


class TestTextHelpers(unittest.TestCase):

    def test_plain_text_from_html(self):
        self.assertEqual(plain_text_from_html("<p>Build <b>APIs</b>\n  fast</p>"), "Build APIs fast")

    def test_plain_text_drops_scripts(self):
        self.assertEqual(plain_text_from_html("<div>Hi<script>alert(1)</script></div>"), "Hi")

    def test_plain_text_empty(self):
        self.assertEqual(plain_text_from_html(""), "")

    def test_format_rfc2822_date(self):
        self.assertEqual(format_posted_date("Tue, 14 Oct 2025 08:30:00 GMT"), "Oct 14, 2025")

    def test_format_iso_date(self):
        self.assertEqual(format_posted_date("2025-10-04"), "Oct 4, 2025")

    def test_format_missing_or_bad_date(self):
        self.assertEqual(format_posted_date(""), "Recently posted")
        self.assertEqual(format_posted_date(None), "Recently posted")
        self.assertEqual(format_posted_date("last week"), "Recently posted")

    def test_parse_naive_date_is_utc(self):
        self.assertEqual(parse_job_date("2025-10-04T12:00:00").tzinfo, timezone.utc)


class TestPageMetadata(unittest.TestCase):

    def setUp(self):
        self.settings = make_settings()

    def test_job_metadata(self):
        job = normalize_job(raw_job())
        meta = job_page_metadata(job, job.slug, self.settings)

        self.assertEqual(meta.title, "Senior Backend Engineer at Acme | JobHub")
        self.assertEqual(meta.description, "Build APIs")
        self.assertEqual(meta.canonical, f"https://jobhub.example.com/jobs/{job.slug}")
        self.assertEqual(meta.og_type, "article")

    def test_unknown_company(self):
        job = normalize_job(raw_job(company=""))
        self.assertIn("Unknown company", job_page_metadata(job, job.slug, self.settings).title)

    def test_description_truncated(self):
        job = normalize_job(raw_job(description="x" * 500))
        self.assertEqual(len(job_page_metadata(job, job.slug, self.settings).description), 200)

    def test_not_found_metadata(self):
        meta = job_page_metadata(None, "ghost-role-abc123def0", self.settings)
        self.assertEqual(meta.title, "Job not found | JobHub")
        self.assertEqual(meta.canonical, "/jobs/ghost-role-abc123def0")


class TestJobPostingStructuredData(unittest.TestCase):

    def setUp(self):
        self.settings = make_settings()

    def build(self, **extra):
        job = normalize_job(raw_job(**extra))
        return job_posting_structured_data(job, job.slug, self.settings)

    def test_core_fields(self):
        data = self.build()
        self.assertEqual(data["@type"], "JobPosting")
        self.assertEqual(data["hiringOrganization"]["name"], "Acme")
        self.assertEqual(data["hiringOrganization"]["sameAs"], "https://acme.example.com")
        self.assertEqual(data["datePosted"], "2025-10-14T08:30:00+00:00")
        self.assertEqual(data["jobLocationType"], "ONSITE")
        self.assertEqual(data["applicationContact"]["url"], "https://example.com/jobs/123")

    def test_salary_block_when_min_and_max(self):
        data = self.build(salary_min=20, salary_max=30, salary_type="H", salary_currency_code="EUR")
        salary = data["baseSalary"]
        self.assertEqual(salary["currency"], "EUR")
        self.assertEqual(salary["value"]["minValue"], 20)
        self.assertEqual(salary["value"]["maxValue"], 30)
        self.assertEqual(salary["value"]["unitText"], "HOUR")

    def test_salary_defaults(self):
        salary = self.build(salary_min=50000, salary_max=70000)["baseSalary"]
        self.assertEqual(salary["currency"], "USD")
        self.assertEqual(salary["value"]["unitText"], "YEAR")

    def test_no_salary_without_both_bounds(self):
        self.assertNotIn("baseSalary", self.build(salary_min=50000))
        self.assertNotIn("baseSalary", self.build(salary_max=70000))

    def test_remote_location(self):
        data = self.build(locations="Remote, US")
        self.assertEqual(data["jobLocationType"], "TELECOMMUTE")

    def test_unparseable_date_omitted(self):
        self.assertNotIn("datePosted", self.build(date="soon"))

    def test_confidential_company(self):
        data = self.build(company="", site="")
        self.assertEqual(data["hiringOrganization"], {"@type": "Organization", "name": "Confidential"})


class TestSitemapAndRobots(unittest.TestCase):

    def setUp(self):
        self.settings = make_settings()

    def test_home_only_when_no_jobs(self):
        entries = sitemap_entries([], self.settings, NOW)
        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0].url, "https://jobhub.example.com/")
        self.assertEqual(entries[0].change_frequency, "hourly")
        self.assertEqual(entries[0].priority, 1.0)

    def test_job_entries(self):
        dated = normalize_job(raw_job())
        undated = normalize_job(raw_job("Nurse", "https://x/2", date="whenever"))

        _, first, second = sitemap_entries([dated, undated], self.settings, NOW)

        self.assertEqual(first.url, f"https://jobhub.example.com/jobs/{dated.slug}")
        self.assertEqual(first.last_modified, datetime(2025, 10, 14, 8, 30, tzinfo=timezone.utc))
        self.assertEqual(first.change_frequency, "daily")
        self.assertEqual(first.priority, 0.6)
        self.assertEqual(second.last_modified, NOW)

    def test_render_sitemap(self):
        job = normalize_job(raw_job())
        xml = render_sitemap(sitemap_entries([job], self.settings, NOW))

        self.assertTrue(xml.startswith('<?xml version="1.0" encoding="UTF-8"?>'))
        self.assertIn('xmlns="http://www.sitemaps.org/schemas/sitemap/0.9"', xml)
        self.assertIn("<loc>https://jobhub.example.com/</loc>", xml)
        self.assertIn(f"<loc>https://jobhub.example.com/jobs/{job.slug}</loc>", xml)
        self.assertIn("<priority>0.6</priority>", xml)

    def test_robots(self):
        body = robots_txt(self.settings)
        self.assertIn("User-agent: *", body)
        self.assertIn("Allow: /", body)
        self.assertIn("Sitemap: https://jobhub.example.com/sitemap.xml", body)


if __name__ == "__main__":
    unittest.main()
