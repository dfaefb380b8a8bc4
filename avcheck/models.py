from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel, Field

EICAR_STRING = (
    r"X5O!P%@AP[4\PZX54(P^)7CC)7}$EICAR-STANDARD-ANTIVIRUS-TEST-FILE!$H+H*"
)

SUSPICIOUS_HTML = """<html>
<head><title>AV Test Page</title></head>
<body>
<script>
// Suspicious JavaScript patterns
var malware_test = "dropper";
document.write(atob("VGVzdCBmb3IgQVYgZGV0ZWN0aW9u"));
eval("console.log('test');");
</script>
</body>
</html>
"""

PHISHING_EML = """From: security@yourbank-verify.com
To: victim@example.com
Subject: Urgent: Verify Your Account

Dear Customer,

Your account has been locked. Click here immediately:
http://malicious-phishing-test.com/verify?user=victim

This is a test file for AV detection.
"""

AUTORUN_INF = """[autorun]
open=test.exe
action=Run Test Program
label=Test Drive
"""


class Defaults(BaseModel):
    observe_delay_s: Optional[float] = Field(default=None, ge=0)
    quarantine_delay_s: Optional[float] = Field(default=None, ge=0)
    http_timeout_s: Optional[float] = Field(default=None, gt=0)


class NetworkProbe(BaseModel):
    malware_url: str = "http://www.eicar.org/download/eicar.com"
    scan_host: str = "localhost"
    scan_ports: List[int] = Field(default_factory=lambda: [22, 23, 445, 3389, 8080])
    scan_timeout_s: float = Field(default=1.0, gt=0)
    # More than this many unreachable ports counts as detected.
    blocked_threshold: int = Field(default=3, ge=0)


class FileProbe(BaseModel):
    eicar_filename: str = "eicar_test.com"
    suspicious_filenames: List[str] = Field(
        default_factory=lambda: [
            "keylogger_test.txt",
            "ransomware_test.txt",
            "trojan_test.txt",
            "backdoor_test.txt",
        ]
    )
    suspicious_content: str = "This is a test file for AV detection\n"


class BehaviorProbe(BaseModel):
    rapid_file_count: int = Field(default=50, ge=1)
    rapid_timeout_s: float = Field(default=5.0, gt=0)
    chained_command: str = 'echo "test" && echo "safe command chaining test"'
    command_timeout_s: float = Field(default=5.0, gt=0)


class WebProbe(BaseModel):
    insecure_url: str = "http://httpforever.com/"
    html_filename: str = "suspicious_test.html"


class EmailProbe(BaseModel):
    eml_filename: str = "phishing_test.eml"


class UsbProbe(BaseModel):
    autorun_filename: str = "autorun.inf"
    payload_filename: str = "test.exe"
    payload_content: str = "echo 'Test executable'\n"


class QuarantineProbe(BaseModel):
    filename: str = "quarantine_test.com"
    locations: List[str] = Field(
        default_factory=lambda: [
            "Windows Defender: C:\\ProgramData\\Microsoft\\Windows Defender\\Quarantine",
            "CortexXDR: Check XDR console for quarantined files",
            "Linux: /var/lib/[av-name]/quarantine/",
        ]
    )


class ProbeSettings(BaseModel):
    defaults: Defaults = Defaults()
    network: NetworkProbe = NetworkProbe()
    file: FileProbe = FileProbe()
    behavior: BehaviorProbe = BehaviorProbe()
    web: WebProbe = WebProbe()
    email: EmailProbe = EmailProbe()
    usb: UsbProbe = UsbProbe()
    quarantine: QuarantineProbe = QuarantineProbe()
