from markstyle.config import DEFAULT_VOID_TAGS, Settings


class TestSettings:
    def test_defaults(self, settings):
        assert settings.root_id == "rootContainer"
        assert settings.list_indent == 3
        assert settings.table_footer is True
        assert settings.void_tags == DEFAULT_VOID_TAGS
        assert settings.verbose is False

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("MARKSTYLE_LIST_INDENT", "2")
        monkeypatch.setenv("MARKSTYLE_TABLE_FOOTER", "false")
        monkeypatch.setenv("MARKSTYLE_VOID_TAGS", '["br"]')
        settings = Settings()
        assert settings.list_indent == 2
        assert settings.table_footer is False
        assert settings.void_tags == ["br"]

    def test_keyword_override(self):
        assert Settings(verbose=True).verbose is True
