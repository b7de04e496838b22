# -*- coding: utf-8 -*-
import requests
import pytest

POST_HTML = """<!DOCTYPE html>
<html><head><title>Marathi Bible Reading</title></head>
<body>
<div class="header">मराठी बायबल वाचन</div>
<div class="post-body entry-content" id="post-body">
<p>पहिले वाचन<br>यशया ४०:१-५</p>
<p>Reading in English is skipped</p>
<p>प्रभू असे म्हणतो, माझ्या लोकांचे सांत्वन करा.</p>
<p>हा प्रभूचा शब्द आहे.</p>
<p>देवाला धन्यवाद.</p>
<p>प्रतिसाद : प्रभू माझा मेंढपाळ आहे.</p>
<p>स्तोत्र २३:१-३</p>
<div>जयघोष</div>
<div>आल्लेलूया, आल्लेलूया!</div>
<p>शुभवर्तमान<br/>योहान १:१-५</p>
<p>प्रारंभी शब्द होता.</p>
<p>हे प्रभूचे हे शुभवर्तमान आहे.</p>
<p>हे ख्रिस्ता तुझी स्तुती असो.</p>
<p>चिंतन</p>
<p>आजच्या वाचनांवर मनन.</p>
</div>
</body></html>
"""

@pytest.fixture
def post_html():
    return POST_HTML

def make_response(status: int, text: str = "", url: str = "https://example.test/") -> requests.Response:
    r = requests.Response()
    r.status_code = status
    r._content = text.encode("utf-8")
    r.encoding = "utf-8"
    r.url = url
    return r
