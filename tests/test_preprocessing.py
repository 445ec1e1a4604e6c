import pytest

from text_compressor.datatypes import Token
from text_compressor.errors import PreprocessingError
from text_compressor.preprocessing import (NltkPreprocessor, PreprocessConfig, is_word,
                                           parse_tokens, split_sentences)


class TestToken:
    def test_parse_lowercases_text_and_keeps_surface(self):
        tok = Token.parse("  Clinton ", "NNP")
        assert tok.text == "clinton"
        assert tok.surface == "Clinton"
        assert tok.tag == "NNP"

    @pytest.mark.parametrize("surface,tag", [("", "NN"), ("  ", "NN"), ("cat", ""), ("cat", " ")])
    def test_parse_rejects_empty_parts(self, surface, tag):
        with pytest.raises(ValueError):
            Token.parse(surface, tag)

    def test_verb_flag_follows_tag_prefix(self):
        assert Token.parse("visited", "VBD").is_verb
        assert Token.parse("visit", "VB").is_verb
        assert not Token.parse("visit", "NN").is_verb

    def test_stop_word_uses_lowercase_text(self):
        tok = Token.parse("The", "DT")
        assert tok.is_stop_word({"the"})
        assert not tok.is_stop_word({"The"})


class TestIsWord:
    @pytest.mark.parametrize("symbol", ["cat", "U.S.", "42", "'s", "-", "n't", "Ünïcode"])
    def test_word_symbols(self, symbol):
        assert is_word(symbol)

    @pytest.mark.parametrize("symbol", [".", ",", "!?", "(", "``", "_"])
    def test_punctuation(self, symbol):
        assert not is_word(symbol)

    def test_empty_symbol_is_an_error(self):
        with pytest.raises(ValueError):
            is_word("   ")


def test_parse_tokens_drops_punctuation(preprocessor):
    tokens = parse_tokens("The cat, obviously, sat.", preprocessor)
    assert [t.surface for t in tokens] == ["The", "cat", "obviously", "sat"]
    assert tokens[-1].is_verb


def test_parse_tokens_rejects_empty_sentence(preprocessor):
    with pytest.raises(ValueError):
        parse_tokens("  ", preprocessor)


def test_parse_tokens_rejects_misaligned_tags(preprocessor):
    preprocessor.tag = lambda tokens: ["NN"]
    with pytest.raises(ValueError):
        parse_tokens("The cat sat.", preprocessor)


def test_regex_sentence_split():
    assert split_sentences("One. Two!  Three?") == ["One.", "Two!", "Three?"]


def test_regex_mode_needs_no_nltk_data(monkeypatch):
    pre = NltkPreprocessor(PreprocessConfig(use_punkt=False))
    monkeypatch.setattr("text_compressor.preprocessing._has_resource", lambda path: False)
    assert pre.split_sentences("A b. C d.") == ["A b.", "C d."]


def test_missing_resources_fail_on_first_use(monkeypatch):
    monkeypatch.setattr("text_compressor.preprocessing._has_resource", lambda path: False)
    pre = NltkPreprocessor()
    with pytest.raises(PreprocessingError):
        pre.tokenize("The cat sat.")


def test_missing_resources_are_downloaded_when_allowed(monkeypatch):
    downloaded = []
    monkeypatch.setattr("text_compressor.preprocessing._has_resource", lambda path: False)
    monkeypatch.setattr("text_compressor.preprocessing.nltk.download",
                        lambda package, quiet=True: downloaded.append(package) or True)
    monkeypatch.setattr("text_compressor.preprocessing.nltk.word_tokenize",
                        lambda sentence, language="english", preserve_line=False: sentence.split())
    pre = NltkPreprocessor(PreprocessConfig(download_missing=True))
    assert pre.tokenize("The cat sat") == ["The", "cat", "sat"]
    assert downloaded == ["punkt_tab", "averaged_perceptron_tagger_eng"]
