# novastack

A compact networking and security toolkit for Python.

## Modules

- `novastack.netproto` decodes Ethernet, ARP, IPv4, UDP and TCP headers with
  `parse_ethernet`, `parse_arp`, `parse_ipv4`, `parse_udp` and `parse_tcp`. Each one
  returns a frozen dataclass and raises `ValueError` when the input is too short.
  `ProtocolStack.process(frame)` passes a raw Ethernet frame up through the layers.
  Along the way it learns ARP entries (`arp_table`, up to 32) and tracks TCP
  connections (`tcp_connections`, up to 32). A layer that is too short is ignored.
- `novastack.stack.NetStack` is an in-memory network stack. It holds:
  - interfaces: `list_interfaces`, `set_up`, `configure`, `configure_v6`,
    `hotplug_add`, `hotplug_remove`. It starts with `eth0`, and there are at most 4.
  - ARP and NDP tables: `arp_update`, `arp_resolve`, `ndp_update`, `ndp_resolve`,
    with 16 entries each.
  - real sockets: `open_socket` with `SockType.TCP` or `SockType.UDP`, `send`,
    `recv`, `close_socket`, with up to 16 at once.
  - DHCP and DNS: `dhcp_request`, `dns_resolve`.
  - a simulated `ping`, which returns `PingStats`.
  - a list of known Wi-Fi networks: `wifi_list`.
  - firewall rules: `fw_add_rule`, `fw_remove_rule`, `fw_list_rules`. Each rule is a
    `FirewallRule`, and there are at most 16.
  - an SDN controller endpoint: `set_sdn_controller`.

  `tick()` ages DHCP leases and sends a test packet through `ProtocolStack`. Failures
  raise `NetStackError`. `NetStack` is a context manager, and leaving it closes its
  sockets.
- `novastack.dhcp` builds DISCOVER and REQUEST messages (`build_discover`,
  `build_request`). It parses OFFER and ACK replies into a `DhcpLease` (`parse_reply`).
  `dhcp_exchange(mac)` runs the exchange over broadcast UDP.
- `novastack.dns` encodes names and queries (`encode_name`, `build_query`). It extracts
  the first A record with `parse_a_record`. `resolve(hostname)` asks `8.8.8.8` by
  default.
- `novastack.netif.UdpLink` is a UDP socket that sends to one fixed destination,
  `127.0.0.1:12345` by default. It is a context manager.
- `novastack.sdn.SdnController` records a controller address. Its `control()` method
  raises `SdnError` until `connect` has been called.
- `novastack.vpn.connect_vpn(config_path)` runs `openvpn --config <path> --daemon`. If
  that fails, it runs `wireguard /installtunnelservice <path>`. It returns the name of
  the tool that succeeded, or raises `VpnError`.
- `novastack.utils` returns fixed message lines: `log`, `network_status`,
  `help_text`, `version_text`, `echo`.
- `novastack.crypto` does AES-256-CBC with a zero IV and no padding:
  - `encrypt_data` and `decrypt_data` work on buffers.
  - `encrypt_file` writes `<path>.enc`, and `decrypt_file` writes `<path>.dec`.
  - `encrypt_network`, `decrypt_network`, `encrypt_ipc` and `decrypt_ipc` are the same
    operations.

  Keys must be 32 bytes, and the data must be a whole number of 16-byte blocks.
  Anything else raises `EncryptionError`.
- `novastack.keystore.KeyStore(root)` stores named keys as `<id>.key` files under
  `root`. It never overwrites an existing key. `attest(data, key_id="TPMKey")` returns
  an HMAC-SHA256 of the data under the stored key.
- `novastack.secure_boot` has `compute_sha256` and `verify_image`. `verify_image`
  checks an RSA PKCS#1 v1.5 SHA-256 signature. The public key can be a key object or
  PEM/DER bytes.
- `novastack.mac.AccessControl` loads up to 32 `MacPolicy(subject, object,
  permissions)` entries. `check_access` grants access only when the first matching
  policy holds every requested `Permission` bit (`READ`, `WRITE`, `EXECUTE`). With no
  matching policy, access is denied.
- `novastack.sandbox.SandboxManager` creates and destroys `Sandbox` records with
  increasing ids, up to 32.
- `novastack.hypervisor.launch_vm(vm_id)` returns a running `VirtualMachine`, which has
  `stop()` and `status()`.

## Installation

```
pip install novastack
```

## Command line

```
netmgr list
netmgr up eth0
netmgr down eth0
netmgr config eth0 192.168.1.10 255.255.255.0 192.168.1.1
netmgr ping 192.168.1.1
netmgr dns example.com
```

Each run starts a fresh in-memory `NetStack`. Changes made by `up`, `down` or `config`
last only for that run. `ping` prints simulated statistics from four probes. `dns`
sends a real query. If there are no arguments or they do not fit a command, netmgr
prints usage and exits with status 1.

## Library use

```python
from novastack.netproto import ProtocolStack, parse_ethernet

stack = ProtocolStack()
header = parse_ethernet(frame)
stack.process(frame)
print(stack.arp_table, stack.tcp_connections)
```

```python
from novastack.stack import NetStack

with NetStack() as net:
    net.configure("eth0", "192.168.1.10", "255.255.255.0", "192.168.1.1")
    net.set_up("eth0", True)
    for iface in net.list_interfaces():
        print(iface)
```

```python
import os
from novastack.crypto import encrypt_data, decrypt_data

key = os.urandom(32)
ciphertext = encrypt_data(b"sixteen byte msg", key)
assert decrypt_data(ciphertext, key) == b"sixteen byte msg"
```

```python
from novastack.mac import AccessControl, MacPolicy, Permission

acl = AccessControl()
acl.load_policy([MacPolicy("editor", "/docs", Permission.READ | Permission.WRITE)])
assert acl.check_access("editor", "/docs", Permission.READ)
```

## What it does not do

- Interface settings, firewall rules and the SDN endpoint are kept only in memory. No
  operating-system configuration is changed.
- `ping` is simulated: about 80% of probes succeed, with 42–51 ms round trips.
- `wifi_scan` finds nothing new and returns 0. `wifi_join` always raises
  `NetStackError`.
- `SdnController.control` does not exchange any protocol messages.
- `KeyStore` is file-based, not hardware-backed.
- Sandboxes and virtual machines are bookkeeping only. No process isolation is
  applied.

## Running the tests

```
pip install novastack[test]
pytest
```