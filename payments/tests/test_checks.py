from payments.checks import check_razorpay_credentials


def test_credentials_present():
    assert check_razorpay_credentials(None) == []


def test_missing_secret_is_an_error(settings):
    settings.RAZORPAY_KEY_SECRET = ""
    ids = [message.id for message in check_razorpay_credentials(None)]
    assert ids == ["payments.E001"]


def test_missing_key_id_is_a_warning(settings):
    settings.RAZORPAY_KEY_ID = ""
    messages = check_razorpay_credentials(None)
    assert [m.id for m in messages] == ["payments.W001"]
    assert not messages[0].is_serious()
