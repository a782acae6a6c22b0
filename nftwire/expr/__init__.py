"""nftables rule expressions, their netlink encoding, and decoding by name."""