import unittest

from docreview.personas import DOCUMENT_SEPARATOR, Persona


class TestPersona(unittest.TestCase):
    def test_parse_defaults_to_legal(self):
        self.assertIs(Persona.parse(None), Persona.LEGAL)

    def test_parse_blank_defaults_to_legal(self):
        self.assertIs(Persona.parse(""), Persona.LEGAL)
        self.assertIs(Persona.parse("   "), Persona.LEGAL)

    def test_parse_is_case_insensitive(self):
        self.assertIs(Persona.parse(" Audit "), Persona.AUDIT)

    def test_parse_rejects_unknown(self):
        with self.assertRaises(ValueError):
            Persona.parse("finance")

    def test_build_prompt_appends_document(self):
        prompt = Persona.LEGAL.build_prompt("The parties agree.")
        self.assertTrue(prompt.startswith("You are a legal compliance expert"))
        self.assertTrue(prompt.endswith(DOCUMENT_SEPARATOR + "The parties agree."))

    def test_audit_profile_expects_exact_text(self):
        self.assertTrue(Persona.AUDIT.profile.uses_exact_text)
        self.assertFalse(Persona.LEGAL.profile.uses_exact_text)
        self.assertIn('"exact_text"', Persona.AUDIT.profile.instructions)
        self.assertIn("Arial", Persona.AUDIT.profile.instructions)


if __name__ == "__main__":
    unittest.main()
