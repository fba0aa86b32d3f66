from novastack.hypervisor import VirtualMachine, launch_vm


def test_launch_sets_running():
    vm = launch_vm(7)
    assert vm.vm_id == 7
    assert vm.running is True
    assert vm.status() == "running"


def test_stop_running_vm():
    vm = launch_vm(3)
    assert vm.stop() is True
    assert vm.running is False
    assert vm.status() == "stopped"


def test_stop_twice_reports_not_running():
    vm = launch_vm(4)
    vm.stop()
    assert vm.stop() is False
    assert vm.status() == "stopped"


def test_new_vm_defaults_to_stopped():
    vm = VirtualMachine(1)
    assert vm.running is False
    assert vm.stop() is False