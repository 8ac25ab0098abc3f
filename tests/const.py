"""Constants and payload builders for SSDP discovery tests."""


BASIC_URN = "urn:schemas-upnp-org:device:Basic:1"


def make_response(usn: str, location: str, server: str = "test", st: str = BASIC_URN) -> str:
    """Build an SSDP search response as a device would send it."""
    return (
        "HTTP/1.1 200 OK\r\n"
        f"USN: {usn}\r\n"
        f"LOCATION: {location}\r\n"
        f"ST: {st}\r\n"
        "CACHE-CONTROL: max-age=1800\r\n"
        f"SERVER: {server}\r\n"
        "\r\n"
    )


DESCRIPTION_WITH_URLBASE = b"""<?xml version="1.0" encoding="utf-8"?>
<root xmlns="urn:schemas-upnp-org:device-1-0">
  <specVersion><major>1</major><minor>0</minor></specVersion>
  <URLBase>http://10.0.0.7:49152/</URLBase>
  <device>
    <deviceType>urn:schemas-upnp-org:device:InternetGatewayDevice:1</deviceType>
    <friendlyName>Home Router</friendlyName>
    <manufacturer>Acme</manufacturer>
    <modelName>R-100</modelName>
    <UDN>uuid:router-1</UDN>
    <iconList>
      <icon>
        <mimetype>image/png</mimetype>
        <width>48</width>
        <height>48</height>
        <depth>24</depth>
        <url>/icons/router.png</url>
      </icon>
    </iconList>
    <serviceList>
      <service>
        <serviceType>urn:schemas-upnp-org:service:Layer3Forwarding:1</serviceType>
        <serviceId>urn:upnp-org:serviceId:L3Forwarding1</serviceId>
        <SCPDURL>/l3f.xml</SCPDURL>
        <controlURL>/ctl/L3F</controlURL>
        <eventSubURL>/evt/L3F</eventSubURL>
      </service>
    </serviceList>
    <deviceList>
      <device>
        <deviceType>urn:schemas-upnp-org:device:WANDevice:1</deviceType>
        <friendlyName>WAN Device</friendlyName>
        <UDN>uuid:router-1-wan</UDN>
        <deviceList>
          <device>
            <deviceType>urn:schemas-upnp-org:device:WANConnectionDevice:1</deviceType>
            <UDN>uuid:router-1-wanconn</UDN>
            <serviceList>
              <service>
                <serviceType>urn:schemas-upnp-org:service:WANIPConnection:1</serviceType>
                <serviceId>urn:upnp-org:serviceId:WANIPConn1</serviceId>
                <SCPDURL>/wanip.xml</SCPDURL>
                <controlURL>/ctl/IPConn</controlURL>
                <eventSubURL>/evt/IPConn</eventSubURL>
              </service>
            </serviceList>
          </device>
        </deviceList>
      </device>
    </deviceList>
  </device>
</root>
"""

DESCRIPTION_WITHOUT_URLBASE = b"""<?xml version="1.0"?>
<root>
  <specVersion><major>1</major><minor>0</minor></specVersion>
  <device>
    <deviceType>urn:schemas-upnp-org:device:Basic:1</deviceType>
    <friendlyName>Lamp</friendlyName>
    <manufacturer>Acme</manufacturer>
    <UDN>uuid:lamp-1</UDN>
  </device>
</root>
"""


