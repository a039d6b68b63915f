import unittest
from pathlib import Path
from unittest import mock

from docreview import cli
from docreview.addin import Status
from docreview.models import AnalysisResult, Issue


class TestCli(unittest.TestCase):
    def test_review_defaults(self):
        args = cli.parse_args(["review", "contract.docx"])
        self.assertEqual(args.command, "review")
        self.assertEqual(args.persona, "legal")
        self.assertIsNone(args.output)

    def test_verbose_after_subcommand(self):
        self.assertTrue(cli.parse_args(["review", "contract.docx", "--verbose"]).verbose)
        self.assertTrue(cli.parse_args(["serve", "--verbose"]).verbose)
        self.assertFalse(cli.parse_args(["review", "contract.docx"]).verbose)

    def test_persona_choices(self):
        with self.assertRaises(SystemExit):
            cli.parse_args(["review", "contract.docx", "--persona", "tax"])

    @mock.patch("docreview.cli.TaskPane")
    @mock.patch("docreview.cli.DocxHost")
    def test_review_writes_next_to_source(self, docx_host, task_pane):
        pane = task_pane.return_value
        pane.analyze_document.return_value = AnalysisResult(
            issues=[Issue(type="Date format", location="paragraph 1", comment="Fix it.", severity="low")]
        )
        pane.status = Status(kind="success", message="Analysis complete!")

        args = cli.parse_args(["review", "docs/contract.docx", "--persona", "audit", "--endpoint", "http://x/api"])
        self.assertEqual(cli.review(args), 0)

        docx_host.assert_called_once_with(
            str(Path("docs/contract.docx")),
            output_path=str(Path("docs/contract_reviewed.docx")),
        )
        self.assertEqual(task_pane.call_args.kwargs["endpoint"], "http://x/api")
        self.assertEqual(task_pane.call_args.kwargs["persona"], "audit")

    @mock.patch("docreview.cli.TaskPane")
    @mock.patch("docreview.cli.DocxHost")
    def test_review_error_status_exits_non_zero(self, _docx_host, task_pane):
        pane = task_pane.return_value
        pane.analyze_document.return_value = None
        pane.status = Status(kind="error", message="Analysis failed: Backend error: 500.")
        args = cli.parse_args(["review", "contract.docx"])
        self.assertEqual(cli.review(args), 1)


if __name__ == "__main__":
    unittest.main()
