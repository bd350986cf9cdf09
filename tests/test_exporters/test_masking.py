from a1saude.exporters.masking import mask_cpf, mask_email, mask_payload, mask_phone


def test_mask_cpf():
    assert mask_cpf("123.456.789-01") == "123.456.789-**"
    assert mask_cpf("123") == "***.***.**1-**"


def test_mask_email():
    assert mask_email("joao.silva@a1saude.com.br") == "jo********@a1saude.com.br"
    assert mask_email("a@x.com") == "a@x.com"
    assert mask_email("sem-arroba") == "***"


def test_mask_phone():
    assert mask_phone("(11) 98765-4321") == "11 *****-4321"
    assert mask_phone("1234") == "********"


def test_mask_payload_copies_and_skips_none():
    row = {"nome": "Ana", "cpf": "12345678901", "email": None, "telefone": "11987654321"}

    masked = mask_payload(row)

    assert masked == {"nome": "Ana", "cpf": "123.456.789-**", "email": None, "telefone": "11 *****-4321"}
    assert row["cpf"] == "12345678901"


def test_mask_payload_custom_keys():
    assert mask_payload({"phone": "11987654321", "cpf": "1"}, keys=["phone"]) == {
        "phone": "11 *****-4321",
        "cpf": "1",
    }
