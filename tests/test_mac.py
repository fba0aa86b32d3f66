from novastack.mac import MAX_POLICIES, AccessControl, MacPolicy, Permission


def make_control(*policies):
    control = AccessControl()
    control.load_policy(policies)
    return control


def test_granted_permission():
    control = make_control(MacPolicy("app", "file", Permission.READ | Permission.WRITE))
    assert control.check_access("app", "file", Permission.READ) is True
    assert control.check_access("app", "file", Permission.READ | Permission.WRITE) is True


def test_missing_bit_denied():
    control = make_control(MacPolicy("app", "file", Permission.READ))
    assert control.check_access("app", "file", Permission.WRITE) is False
    assert control.check_access("app", "file", Permission.READ | Permission.WRITE) is False


def test_no_policy_denied():
    control = make_control(MacPolicy("app", "file", Permission.READ))
    assert control.check_access("other", "file", Permission.READ) is False
    assert control.check_access("app", "other", Permission.READ) is False


def test_empty_control_denies():
    assert AccessControl().check_access("app", "file", Permission.READ) is False


def test_first_matching_policy_decides():
    control = make_control(
        MacPolicy("app", "file", Permission.READ),
        MacPolicy("app", "file", Permission.WRITE),
    )
    assert control.check_access("app", "file", Permission.WRITE) is False


def test_plain_int_permissions():
    control = make_control(MacPolicy("svc", "net", 0b101))
    assert control.check_access("svc", "net", 0b100) is True
    assert control.check_access("svc", "net", 0b010) is False


def test_load_truncates_to_limit():
    policies = [MacPolicy(f"s{i}", "obj", Permission.READ) for i in range(MAX_POLICIES + 5)]
    control = AccessControl()
    assert control.load_policy(policies) == MAX_POLICIES
    assert control.check_access(f"s{MAX_POLICIES - 1}", "obj", Permission.READ) is True
    assert control.check_access(f"s{MAX_POLICIES}", "obj", Permission.READ) is False


def test_load_replaces_previous():
    control = make_control(MacPolicy("app", "file", Permission.READ))
    control.load_policy([MacPolicy("app", "dir", Permission.READ)])
    assert control.check_access("app", "file", Permission.READ) is False
    assert control.check_access("app", "dir", Permission.READ) is True